"""Process-local repositories used for prototypes and tests."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date

from lodging_admin.records import InnRecord, ReservationFilter, ReservationRecord


@dataclass
class InMemoryStore:
    """Shared state behind the in-memory repositories."""

    inns: dict[uuid.UUID, InnRecord] = field(default_factory=dict)
    reservations: dict[uuid.UUID, ReservationRecord] = field(default_factory=dict)
    write_calls: int = 0


def apply_filter(
    records: Sequence[ReservationRecord], filter: ReservationFilter | None
) -> list[ReservationRecord]:
    """Apply the fetch-boundary filters in Python."""
    if filter is None:
        return list(records)
    result: list[ReservationRecord] = []
    for record in records:
        if filter.inn_id is not None and record.inn_id != filter.inn_id:
            continue
        if filter.source and record.source != filter.source:
            continue
        if filter.check_in_from and (
            record.check_in is None or record.check_in < filter.check_in_from
        ):
            continue
        if filter.check_in_to and (
            record.check_in is None or record.check_in > filter.check_in_to
        ):
            continue
        if not filter.matches_search(record):
            continue
        result.append(record)
    return result


def _listing_order(record: ReservationRecord) -> tuple:
    # Newest booking first, undated bookings last.
    booked = record.booking_date or date.min
    return (record.booking_date is None, -booked.toordinal())


class InMemoryInnRepository:
    """Inn repository backed by an :class:`InMemoryStore`."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def list_all(self) -> list[InnRecord]:
        return sorted(
            (replace(inn) for inn in self._store.inns.values()),
            key=lambda inn: inn.label,
        )

    async def get(self, inn_id: uuid.UUID) -> InnRecord | None:
        inn = self._store.inns.get(inn_id)
        return replace(inn) if inn is not None else None

    async def save(self, inn: InnRecord) -> InnRecord:
        self._store.write_calls += 1
        self._store.inns[inn.id] = replace(inn)
        return replace(inn)

    async def delete(self, inn_id: uuid.UUID) -> None:
        self._store.write_calls += 1
        self._store.inns.pop(inn_id, None)

    async def clear(self) -> None:
        self._store.write_calls += 1
        self._store.inns.clear()


class InMemoryReservationRepository:
    """Reservation repository backed by an :class:`InMemoryStore`."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def find(
        self,
        filter: ReservationFilter | None = None,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ReservationRecord]:
        records = apply_filter(list(self._store.reservations.values()), filter)
        records.sort(key=_listing_order)
        end = None if limit is None else skip + limit
        return [replace(record) for record in records[skip:end]]

    async def save_many(self, reservations: Sequence[ReservationRecord]) -> None:
        if not reservations:
            return
        self._store.write_calls += 1
        for record in reservations:
            self._store.reservations[record.id] = replace(record)

    async def clear(self) -> None:
        self._store.write_calls += 1
        self._store.reservations.clear()
