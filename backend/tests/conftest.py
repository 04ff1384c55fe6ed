"""Test fixtures for the lodging admin backend."""
from __future__ import annotations

import csv
import io
import os
import uuid
from collections.abc import AsyncIterator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("APP_ENV", "test")
os.environ["LODGING_ADMIN_PIN"] = "2468"
os.environ["LODGING_STORE"] = "database"

from lodging_admin.core.config import get_settings
from lodging_admin.db.base import Base
from lodging_admin.db.session import dispose_engine, get_sessionmaker
from lodging_admin.main import app
from lodging_admin.models import Inn, compose_display_name
from lodging_admin.repositories import (
    InMemoryInnRepository,
    InMemoryReservationRepository,
    InMemoryStore,
)

CSV_HEADER = [
    "物件名",
    "物件タグ",
    "予約サイト",
    "AirHost予約ID",
    "チェックイン",
    "チェックアウト",
    "合計日数",
    "ゲスト数",
    "大人",
    "子供",
    "幼児",
    "国籍",
    "予約日",
    "販売",
    "料金プラン",
    "状態",
    "ゲスト名",
    "電話番号",
]

_ROW_DEFAULTS = {
    "物件名": "001.Seaside",
    "物件タグ": "001",
    "予約サイト": "Booking.com",
    "AirHost予約ID": "",
    "チェックイン": "2025-03-10",
    "チェックアウト": "2025-03-13",
    "合計日数": "3",
    "ゲスト数": "2",
    "大人": "2",
    "子供": "0",
    "幼児": "0",
    "国籍": "JP",
    "予約日": "2025-02-01",
    "販売": "30000",
    "料金プラン": "Standard",
    "状態": "確認済み",
    "ゲスト名": "Hanako Yamada",
    "電話番号": "090-0000-0000",
}


@pytest.fixture()
def build_csv() -> Callable[..., str]:
    """Return a helper that renders export rows (header-keyed overrides) as CSV text."""

    def _build(*rows: dict[str, str]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for overrides in rows:
            values = {**_ROW_DEFAULTS, **overrides}
            writer.writerow([values[column] for column in CSV_HEADER])
        return buffer.getvalue()

    return _build


@pytest.fixture()
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def inn_repository(memory_store: InMemoryStore) -> InMemoryInnRepository:
    return InMemoryInnRepository(memory_store)


@pytest.fixture()
def reservation_repository(memory_store: InMemoryStore) -> InMemoryReservationRepository:
    return InMemoryReservationRepository(memory_store)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    import lodging_admin.models  # noqa: F401

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an authenticated async client and a seeded inn."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        inn = Inn(
            id=uuid.uuid4(),
            name="Seaside",
            tag="001",
            display_name=compose_display_name("Seaside", "001"),
        )
        session.add(inn)
        await session.commit()
        context: dict[str, object] = {"inn_id": inn.id, "inn_label": inn.label}

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/auth/pin", json={"pin": "2468"})
        assert response.status_code == 200, response.text
        token = response.json()["access_token"]
        context["client"] = client
        context["headers"] = {"Authorization": f"Bearer {token}"}
        yield context
