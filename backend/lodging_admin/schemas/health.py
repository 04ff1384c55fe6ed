"""Health payload schema."""
from __future__ import annotations

from pydantic import BaseModel


class HealthRead(BaseModel):
    """Liveness plus the settings an operator checks first."""

    status: str = "ok"
    service: str
    environment: str
    store: str
    dashboard_weeks: tuple[str, str]
    notifications_configured: bool
