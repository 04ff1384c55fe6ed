"""Weekly dashboard metric endpoints."""
from __future__ import annotations

import csv
import io
import re
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from lodging_admin.api import deps
from lodging_admin.api.v1.reservations import reservation_filter
from lodging_admin.core.config import get_settings
from lodging_admin.records import InnRecord, ReservationFilter
from lodging_admin.repositories import InnRepository, ReservationRepository
from lodging_admin.schemas.metrics import (
    WeeklyAdrRead,
    WeeklyOccupancyRead,
    WeeklySalesRead,
    WeekRange,
    YearCompareRead,
)
from lodging_admin.services import inn_service, metrics_service
from lodging_admin.services.auth_service import Session
from lodging_admin.services.metrics_service import MetricKind
from lodging_admin.services.week_service import dashboard_week_range

router = APIRouter()


def _dashboard_weeks() -> list[str]:
    settings = get_settings()
    return dashboard_week_range(settings.dashboard_start_year, settings.dashboard_years)


def _dashboard_years() -> list[int]:
    settings = get_settings()
    start = settings.dashboard_start_year
    return list(range(start, start + settings.dashboard_years))


async def _selected_inn(repository: InnRepository, inn_id: uuid.UUID | None) -> InnRecord:
    inns = await inn_service.list_inns(repository)
    if not inns:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No inns registered")
    if inn_id is None:
        return inns[0]
    for inn in inns:
        if inn.id == inn_id:
            return inn
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inn not found")


_UNSAFE_FILENAME_RE = re.compile(r'[/\\?*:"|]')


def _to_csv_stream(rows: list[list[str]]) -> Iterable[str]:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    # Spreadsheet apps need the BOM to read UTF-8.
    yield "\ufeff"
    for row in rows:
        buffer.seek(0)
        buffer.truncate(0)
        writer.writerow(row)
        yield buffer.getvalue()


@router.get("/weeks", response_model=WeekRange, summary="Dashboard week range")
async def read_week_range(
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> WeekRange:
    return WeekRange(weeks=_dashboard_weeks())


@router.get(
    "/occupancy",
    response_model=list[WeeklyOccupancyRead],
    summary="Weekly occupancy per inn",
)
async def read_occupancy(
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
    dense: bool = False,
) -> list[WeeklyOccupancyRead]:
    records = await repository.find()
    points = metrics_service.build_weekly_occupancy(
        metrics_service.build_stay_nights(records, filters)
    )
    if dense:
        points = metrics_service.fill_week_range(points, _dashboard_weeks())
    return [WeeklyOccupancyRead.model_validate(point) for point in points]


@router.get("/adr", response_model=list[WeeklyAdrRead], summary="Weekly ADR per inn")
async def read_adr(
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
    dense: bool = False,
) -> list[WeeklyAdrRead]:
    records = await repository.find()
    points = metrics_service.build_weekly_adr(records, filters)
    if dense:
        points = metrics_service.fill_week_range(points, _dashboard_weeks())
    return [WeeklyAdrRead.model_validate(point) for point in points]


@router.get("/sales", response_model=list[WeeklySalesRead], summary="Weekly sales per inn")
async def read_sales(
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
    dense: bool = False,
) -> list[WeeklySalesRead]:
    records = await repository.find()
    points = metrics_service.build_weekly_sales(records, filters)
    if dense:
        points = metrics_service.fill_week_range(points, _dashboard_weeks())
    return [WeeklySalesRead.model_validate(point) for point in points]


@router.get(
    "/{kind}/year-compare",
    response_model=list[YearCompareRead],
    summary="One inn's weekly metric with a column per dashboard year",
)
async def read_year_compare(
    kind: MetricKind,
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    inn_repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
) -> list[YearCompareRead]:
    inn = await _selected_inn(inn_repository, filters.inn_id)
    points = metrics_service.build_weekly_points(
        kind, await repository.find(), replace(filters, inn_id=inn.id)
    )
    rows = metrics_service.build_year_compare(points, _dashboard_years())
    return [YearCompareRead.model_validate(row) for row in rows]


@router.get("/{kind}/export", summary="Download one inn's weekly metric as CSV")
async def export_metric(
    kind: MetricKind,
    filters: Annotated[ReservationFilter, Depends(reservation_filter)],
    inn_repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    repository: Annotated[ReservationRepository, Depends(deps.get_reservation_repository)],
    _: Annotated[Session, Depends(deps.get_current_session)],
    compare_by_year: bool = False,
) -> StreamingResponse:
    inn = await _selected_inn(inn_repository, filters.inn_id)
    points = metrics_service.build_weekly_points(
        kind, await repository.find(), replace(filters, inn_id=inn.id)
    )
    rows = metrics_service.export_rows(
        kind,
        points,
        week_keys=_dashboard_weeks(),
        compare_years=_dashboard_years() if compare_by_year else None,
    )
    safe_name = _UNSAFE_FILENAME_RE.sub("_", inn.label)
    filename = f"{kind.title}_{safe_name}_{date.today():%Y%m%d}.csv"
    return StreamingResponse(
        _to_csv_stream(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
