"""Repository interfaces for the inn and reservation aggregates."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Protocol

from lodging_admin.records import InnRecord, ReservationFilter, ReservationRecord


class InnRepository(Protocol):
    """Storage for registered inns."""

    async def list_all(self) -> list[InnRecord]: ...

    async def get(self, inn_id: uuid.UUID) -> InnRecord | None: ...

    async def save(self, inn: InnRecord) -> InnRecord: ...

    async def delete(self, inn_id: uuid.UUID) -> None: ...

    async def clear(self) -> None: ...


class ReservationRepository(Protocol):
    """Storage for imported reservations."""

    async def find(
        self,
        filter: ReservationFilter | None = None,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ReservationRecord]: ...

    async def save_many(self, reservations: Sequence[ReservationRecord]) -> None: ...

    async def clear(self) -> None: ...
