"""Common API dependencies."""

from __future__ import annotations

from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from lodging_admin.core.config import get_settings
from lodging_admin.db.session import get_session
from lodging_admin.repositories import (
    InMemoryInnRepository,
    InMemoryReservationRepository,
    InMemoryStore,
    InnRepository,
    ReservationRepository,
    SqlInnRepository,
    SqlReservationRepository,
)
from lodging_admin.services.auth_service import PinAuthenticator, Session

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_v1_prefix}/auth/pin", auto_error=False
)

_memory_store = InMemoryStore()


def get_memory_store() -> InMemoryStore:
    """Process-wide store used when ``LODGING_STORE=memory``."""
    return _memory_store


async def get_db_session() -> AsyncGenerator[AsyncSession | None, None]:
    """Provide an async database session unless the memory store is active."""
    if get_settings().lodging_store == "memory":
        yield None
        return
    async for session in get_session():
        yield session


async def get_inn_repository(
    session: Annotated[AsyncSession | None, Depends(get_db_session)],
) -> InnRepository:
    if session is None:
        return InMemoryInnRepository(get_memory_store())
    return SqlInnRepository(session)


async def get_reservation_repository(
    session: Annotated[AsyncSession | None, Depends(get_db_session)],
) -> ReservationRepository:
    if session is None:
        return InMemoryReservationRepository(get_memory_store())
    return SqlReservationRepository(session)


def get_authenticator() -> PinAuthenticator:
    return PinAuthenticator(get_settings())


async def get_current_session(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    authenticator: Annotated[PinAuthenticator, Depends(get_authenticator)],
) -> Session:
    """Authenticate request via bearer token."""
    session = authenticator.current_session(token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


InnRepo = Annotated[InnRepository, Depends(get_inn_repository)]
ReservationRepo = Annotated[ReservationRepository, Depends(get_reservation_repository)]
CurrentSession = Annotated[Session, Depends(get_current_session)]
