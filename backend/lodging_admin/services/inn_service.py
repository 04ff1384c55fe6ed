"""Inn administration services."""

from __future__ import annotations

import logging
import uuid

from lodging_admin.models.inn import compose_display_name
from lodging_admin.records import InnRecord
from lodging_admin.repositories.base import InnRepository, ReservationRepository
from lodging_admin.schemas.inn import InnCreate, InnUpdate

logger = logging.getLogger(__name__)


async def list_inns(repository: InnRepository) -> list[InnRecord]:
    """Return all inns ordered by display label."""
    inns = await repository.list_all()
    return sorted(inns, key=lambda inn: inn.label)


async def create_inn(repository: InnRepository, payload: InnCreate) -> InnRecord:
    """Register a new inn; the display label is derived from tag and name."""
    data = payload.model_dump()
    inn = InnRecord(
        id=uuid.uuid4(),
        display_name=compose_display_name(data["name"], data.get("tag")),
        **data,
    )
    return await repository.save(inn)


async def update_inn(
    repository: InnRepository, inn: InnRecord, payload: InnUpdate
) -> InnRecord:
    """Update mutable fields and recompute the display label."""
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and not value:
            continue
        setattr(inn, field, value)
    inn.display_name = compose_display_name(inn.name, inn.tag)
    return await repository.save(inn)


async def delete_inn(repository: InnRepository, inn_id: uuid.UUID) -> None:
    """Delete an inn; its reservations are kept and become unresolved."""
    await repository.delete(inn_id)
    logger.info("Deleted inn %s", inn_id)


async def reset_lodging_data(
    inn_repository: InnRepository,
    reservation_repository: ReservationRepository,
    *,
    include_inns: bool = False,
) -> None:
    """Delete every reservation, and optionally every inn."""
    await reservation_repository.clear()
    if include_inns:
        await inn_repository.clear()
    logger.warning("Reset lodging data (include_inns=%s)", include_inns)
