"""SQLAlchemy repository tests on SQLite."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from lodging_admin.core.errors import RepositoryError
from lodging_admin.db.session import get_sessionmaker
from lodging_admin.records import InnRecord, ReservationFilter, ReservationRecord
from lodging_admin.repositories import SqlInnRepository, SqlReservationRepository
from lodging_admin.services.csv_import_service import parse_documents
from lodging_admin.services.reconciliation_service import import_reservations

pytestmark = pytest.mark.asyncio


async def test_inn_round_trip(reset_database: None, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    inn_id = uuid.uuid4()
    async with sessionmaker() as session:
        repository = SqlInnRepository(session)
        await repository.save(
            InnRecord(id=inn_id, name="Forest", tag="002", display_name="002.Forest")
        )
        await repository.save(
            InnRecord(id=inn_id, name="Forest Lodge", tag="002", display_name="002.Forest Lodge")
        )

    async with sessionmaker() as session:
        repository = SqlInnRepository(session)
        [inn] = await repository.list_all()
        assert inn.id == inn_id
        assert inn.label == "002.Forest Lodge"
        await repository.delete(inn_id)
        assert await repository.get(inn_id) is None


async def test_reservation_filters_and_ordering(reset_database: None, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    inn_a, inn_b = uuid.uuid4(), uuid.uuid4()
    records = [
        ReservationRecord(
            id=uuid.uuid4(),
            inn_id=inn_a,
            source="Airbnb",
            rate_plan="Non-refundable",
            check_in=date(2025, 3, 10),
            booking_date=date(2025, 1, 5),
        ),
        ReservationRecord(
            id=uuid.uuid4(),
            inn_id=inn_a,
            source="Booking.com",
            rate_plan="Standard",
            check_in=date(2025, 4, 10),
            booking_date=date(2025, 2, 5),
        ),
        ReservationRecord(
            id=uuid.uuid4(),
            inn_id=inn_b,
            source="Airbnb",
            check_in=date(2025, 5, 10),
            booking_date=None,
        ),
    ]
    async with sessionmaker() as session:
        repository = SqlReservationRepository(session)
        await repository.save_many(records)

        listed = await repository.find()
        assert [record.id for record in listed] == [records[1].id, records[0].id, records[2].id]

        by_inn = await repository.find(ReservationFilter(inn_id=inn_b))
        assert [record.id for record in by_inn] == [records[2].id]

        by_source = await repository.find(ReservationFilter(source="Airbnb"))
        assert {record.id for record in by_source} == {records[0].id, records[2].id}

        by_range = await repository.find(
            ReservationFilter(check_in_from=date(2025, 4, 1), check_in_to=date(2025, 4, 30))
        )
        assert [record.id for record in by_range] == [records[1].id]

        searched = await repository.find(ReservationFilter(search_text="REFUNDABLE"))
        assert [record.id for record in searched] == [records[0].id]

        page = await repository.find(skip=1, limit=1)
        assert [record.id for record in page] == [records[0].id]


async def test_import_persists_through_sql_repositories(
    reset_database: None, db_url: str, build_csv
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        inns = SqlInnRepository(session)
        reservations = SqlReservationRepository(session)
        await inns.save(
            InnRecord(id=uuid.uuid4(), name="Seaside", tag="001", display_name="001.Seaside")
        )
        for amount in ("5000", "8000"):
            await import_reservations(
                parse_documents(
                    [build_csv({"AirHost予約ID": "AH-100", "販売": amount})]
                ).reservations,
                inn_repository=inns,
                reservation_repository=reservations,
            )

    async with sessionmaker() as session:
        [stored] = await SqlReservationRepository(session).find()
        assert stored.external_id == "AH-100"
        assert stored.sale_amount == 8000


async def test_clear_removes_everything(reset_database: None, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        repository = SqlReservationRepository(session)
        await repository.save_many(
            [ReservationRecord(id=uuid.uuid4(), inn_id=uuid.uuid4()) for _ in range(3)]
        )
        await repository.clear()
        assert await repository.find() == []


async def test_search_pages_after_matching(reset_database: None, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    inn_id = uuid.uuid4()
    records = [
        ReservationRecord(
            id=uuid.uuid4(),
            inn_id=inn_id,
            rate_plan=plan,
            booking_date=date(2025, 1, day),
        )
        for day, plan in ((3, "Breakfast"), (2, "Room only"), (1, "Breakfast plan"))
    ]
    async with sessionmaker() as session:
        repository = SqlReservationRepository(session)
        await repository.save_many(records)

        page = await repository.find(ReservationFilter(search_text="breakfast"), skip=1, limit=1)
        assert [record.id for record in page] == [records[2].id]

        blank = await repository.find(ReservationFilter(search_text="   "), limit=2)
        assert [record.id for record in blank] == [records[0].id, records[1].id]


async def test_save_many_wraps_driver_overflow_and_rolls_back(
    reset_database: None, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    inn_id = uuid.uuid4()
    kept = ReservationRecord(id=uuid.uuid4(), inn_id=inn_id, sale_amount=5000)
    async with sessionmaker() as session:
        repository = SqlReservationRepository(session)
        await repository.save_many([kept])

        with pytest.raises(RepositoryError, match="Failed to save reservations"):
            await repository.save_many(
                [
                    ReservationRecord(id=uuid.uuid4(), inn_id=inn_id, sale_amount=7000),
                    ReservationRecord(id=uuid.uuid4(), inn_id=inn_id, sale_amount=10**20),
                ]
            )

        stored = await repository.find()
        assert [(record.id, record.sale_amount) for record in stored] == [(kept.id, 5000)]
