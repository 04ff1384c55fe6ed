"""SQLAlchemy-backed repositories."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lodging_admin.core.errors import RepositoryError
from lodging_admin.models.inn import Inn
from lodging_admin.models.reservation import Reservation
from lodging_admin.records import (
    INN_FIELDS,
    RESERVATION_FIELDS,
    InnRecord,
    ReservationFilter,
    ReservationRecord,
)

logger = logging.getLogger(__name__)

_ID_CHUNK = 500


def inn_to_record(row: Inn) -> InnRecord:
    return InnRecord(**{name: getattr(row, name) for name in INN_FIELDS})


def reservation_to_record(row: Reservation) -> ReservationRecord:
    return ReservationRecord(**{name: getattr(row, name) for name in RESERVATION_FIELDS})


class SqlInnRepository:
    """Inn storage in the ``lodging_inns`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[InnRecord]:
        stmt = select(Inn).order_by(Inn.display_name, Inn.name)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to fetch inns: {exc}") from exc
        return [inn_to_record(row) for row in result.scalars().all()]

    async def get(self, inn_id: uuid.UUID) -> InnRecord | None:
        try:
            row = await self._session.get(Inn, inn_id)
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to fetch inn: {exc}") from exc
        return inn_to_record(row) if row is not None else None

    async def save(self, inn: InnRecord) -> InnRecord:
        try:
            row = await self._session.get(Inn, inn.id)
            if row is None:
                row = Inn(id=inn.id, name=inn.name)
                self._session.add(row)
            for name in INN_FIELDS:
                setattr(row, name, getattr(inn, name))
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise RepositoryError(f"Failed to save inn: {exc}") from exc
        return inn_to_record(row)

    async def delete(self, inn_id: uuid.UUID) -> None:
        try:
            await self._session.execute(delete(Inn).where(Inn.id == inn_id))
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise RepositoryError(f"Failed to delete inn: {exc}") from exc

    async def clear(self) -> None:
        try:
            await self._session.execute(delete(Inn))
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise RepositoryError(f"Failed to delete inns: {exc}") from exc


class SqlReservationRepository:
    """Reservation storage in the ``lodging_reservations`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _filtered(filter: ReservationFilter | None) -> Select[tuple[Reservation]]:
        stmt = select(Reservation)
        if filter is not None:
            if filter.inn_id is not None:
                stmt = stmt.where(Reservation.inn_id == filter.inn_id)
            if filter.source:
                stmt = stmt.where(Reservation.source == filter.source)
            if filter.check_in_from is not None:
                stmt = stmt.where(Reservation.check_in >= filter.check_in_from)
            if filter.check_in_to is not None:
                stmt = stmt.where(Reservation.check_in <= filter.check_in_to)
        return stmt.order_by(
            Reservation.booking_date.desc().nulls_last(),
            Reservation.check_in.desc().nulls_last(),
            Reservation.id,
        )

    async def find(
        self,
        filter: ReservationFilter | None = None,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ReservationRecord]:
        stmt = self._filtered(filter)
        search = filter if filter is not None and (filter.search_text or "").strip() else None
        if search is None:
            if skip:
                stmt = stmt.offset(skip)
            if limit is not None:
                stmt = stmt.limit(limit)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to fetch reservations: {exc}") from exc
        records = [reservation_to_record(row) for row in result.scalars().all()]
        if search is not None:
            records = [record for record in records if search.matches_search(record)]
            end = None if limit is None else skip + limit
            records = records[skip:end]
        return records

    async def save_many(self, reservations: Sequence[ReservationRecord]) -> None:
        """Insert or update every record by id in a single transaction."""
        if not reservations:
            return
        ids = [record.id for record in reservations]
        try:
            existing: dict[uuid.UUID, Reservation] = {}
            for start in range(0, len(ids), _ID_CHUNK):
                chunk = ids[start : start + _ID_CHUNK]
                result = await self._session.execute(
                    select(Reservation).where(Reservation.id.in_(chunk))
                )
                existing.update({row.id: row for row in result.scalars().all()})

            for record in reservations:
                row = existing.get(record.id)
                if row is None:
                    row = Reservation(id=record.id, inn_id=record.inn_id)
                    self._session.add(row)
                    existing[record.id] = row
                for name in RESERVATION_FIELDS:
                    setattr(row, name, getattr(record, name))
            await self._session.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            # sqlite3 raises OverflowError for integers beyond 64 bits.
            await self._session.rollback()
            raise RepositoryError(f"Failed to save reservations: {exc}") from exc
        logger.info("Saved %d reservations", len(reservations))

    async def clear(self) -> None:
        try:
            await self._session.execute(delete(Reservation))
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise RepositoryError(f"Failed to delete reservations: {exc}") from exc
