"""Dashboard PIN authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from lodging_admin.api import deps
from lodging_admin.core.config import get_settings
from lodging_admin.core.errors import AuthError
from lodging_admin.schemas.auth import PinLogin, SessionRead, Token
from lodging_admin.services.auth_service import PinAuthenticator, Session

router = APIRouter()

_SECONDS = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def _parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    return count, _SECONDS.get(window_str.strip().lower(), fallback[1])


_LOGIN_LIMIT = _parse_rate(get_settings().rate_limit_login, fallback=(10, 60))


async def _login_rate_limit(request: Request, response: Response) -> None:
    # Throttling only applies once the limiter has a Redis connection.
    if FastAPILimiter.redis is None:
        return None
    limiter = RateLimiter(times=_LOGIN_LIMIT[0], seconds=_LOGIN_LIMIT[1])
    await limiter(request, response)


@router.post(
    "/pin",
    response_model=Token,
    summary="Exchange the dashboard PIN for a bearer token",
    dependencies=[Depends(_login_rate_limit)],
)
async def login_with_pin(
    payload: PinLogin,
    authenticator: Annotated[PinAuthenticator, Depends(deps.get_authenticator)],
) -> Token:
    try:
        session = authenticator.authenticate(payload.pin)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return Token(access_token=session.token, expires_at=session.expires_at)


@router.get("/session", response_model=SessionRead, summary="Current session")
async def read_session(
    session: Annotated[Session, Depends(deps.get_current_session)],
) -> SessionRead:
    return SessionRead(subject=session.subject, expires_at=session.expires_at)
