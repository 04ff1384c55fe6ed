"""Liveness endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from lodging_admin.core.config import get_settings
from lodging_admin.schemas.health import HealthRead
from lodging_admin.services.week_service import dashboard_week_range

router = APIRouter()


@router.get("", response_model=HealthRead, summary="Service health status")
async def healthcheck() -> HealthRead:
    settings = get_settings()
    weeks = dashboard_week_range(settings.dashboard_start_year, settings.dashboard_years)
    return HealthRead(
        service=settings.app_name,
        environment=settings.app_env,
        store=settings.lodging_store,
        dashboard_weeks=(weeks[0], weeks[-1]),
        notifications_configured=bool(settings.notification_webhook_url),
    )
