"""Inn administration API endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from lodging_admin.api import deps
from lodging_admin.records import InnRecord
from lodging_admin.repositories import InnRepository
from lodging_admin.schemas.inn import InnCreate, InnRead, InnUpdate
from lodging_admin.services import inn_service
from lodging_admin.services.auth_service import Session

router = APIRouter()


async def _get_or_404(repository: InnRepository, inn_id: uuid.UUID) -> InnRecord:
    inn = await repository.get(inn_id)
    if inn is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inn not found")
    return inn


@router.get("", response_model=list[InnRead], summary="List inns")
async def list_inns(
    repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> list[InnRead]:
    inns = await inn_service.list_inns(repository)
    return [InnRead.model_validate(inn) for inn in inns]


@router.post(
    "",
    response_model=InnRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register inn",
)
async def create_inn(
    payload: InnCreate,
    repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> InnRead:
    inn = await inn_service.create_inn(repository, payload)
    return InnRead.model_validate(inn)


@router.get("/{inn_id}", response_model=InnRead, summary="Get inn")
async def read_inn(
    inn_id: uuid.UUID,
    repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> InnRead:
    inn = await _get_or_404(repository, inn_id)
    return InnRead.model_validate(inn)


@router.patch("/{inn_id}", response_model=InnRead, summary="Update inn")
async def update_inn(
    inn_id: uuid.UUID,
    payload: InnUpdate,
    repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> InnRead:
    inn = await _get_or_404(repository, inn_id)
    updated = await inn_service.update_inn(repository, inn, payload)
    return InnRead.model_validate(updated)


@router.delete(
    "/{inn_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete inn",
)
async def delete_inn(
    inn_id: uuid.UUID,
    repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> Response:
    await _get_or_404(repository, inn_id)
    await inn_service.delete_inn(repository, inn_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
