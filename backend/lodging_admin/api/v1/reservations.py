"""Reservation listing and reset endpoints."""
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from lodging_admin.api import deps
from lodging_admin.records import ReservationFilter
from lodging_admin.repositories import InnRepository, ReservationRepository
from lodging_admin.schemas.reservation import ReservationRead
from lodging_admin.services import inn_service
from lodging_admin.services.auth_service import Session

router = APIRouter()


def reservation_filter(
    inn_id: uuid.UUID | None = None,
    source: str | None = None,
    check_in_from: date | None = None,
    check_in_to: date | None = None,
    q: str | None = None,
) -> ReservationFilter:
    """Shared query-string filters for reservations and metrics."""
    return ReservationFilter(
        inn_id=inn_id,
        source=source or None,
        check_in_from=check_in_from,
        check_in_to=check_in_to,
        search_text=q or None,
    )


@router.get("", response_model=list[ReservationRead], summary="List reservations")
async def list_reservations(
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[ReservationRead]:
    records = await repository.find(filters, skip=skip, limit=limit)
    return [ReservationRead.model_validate(record) for record in records]


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete all reservations",
)
async def reset_reservations(
    inn_repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    reservation_repository: Annotated[
        ReservationRepository, Depends(deps.get_reservation_repository)
    ],
    _: Annotated[Session, Depends(deps.get_current_session)],
    include_inns: bool = False,
) -> Response:
    await inn_service.reset_lodging_data(
        inn_repository, reservation_repository, include_inns=include_inns
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
