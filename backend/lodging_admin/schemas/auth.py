"""Authentication schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PinLogin(BaseModel):
    """Shared dashboard PIN."""

    pin: str = Field(min_length=1, max_length=64)


class Token(BaseModel):
    """Bearer token issued for a dashboard session."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class SessionRead(BaseModel):
    """Current session metadata."""

    subject: str
    expires_at: datetime
