"""Weekly occupancy, ADR and sales aggregation."""

from __future__ import annotations

import enum
import uuid
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from lodging_admin.records import ReservationFilter, ReservationRecord
from lodging_admin.services.week_service import (
    MAX_WEEK,
    WeekKey,
    coerce_date,
    format_week_range,
    parse_week_key,
    week_key,
)

DAYS_PER_WEEK = 7


@dataclass(frozen=True, slots=True)
class StayNight:
    """One calendar night of one reservation."""

    inn_id: uuid.UUID
    reservation_id: uuid.UUID
    inn_name: str | None
    source: str | None
    date: date
    status: str | None


@dataclass(slots=True)
class WeeklyOccupancyPoint:
    week_key: str
    inn_id: uuid.UUID
    inn_name: str | None
    stayed_nights: int
    occupancy: float
    year: int
    week: int


@dataclass(slots=True)
class WeeklyAdrPoint:
    week_key: str
    inn_id: uuid.UUID
    inn_name: str | None
    total_sale_amount: int
    total_nights: int
    adr: float


@dataclass(slots=True)
class WeeklySalesPoint:
    week_key: str
    inn_id: uuid.UUID
    inn_name: str | None
    total_sale_amount: int


def _passes_filter(record: ReservationRecord, filter: ReservationFilter | None) -> bool:
    if filter is None:
        return True
    if filter.inn_id is not None and record.inn_id != filter.inn_id:
        return False
    # Reservations without a channel are kept by a channel filter.
    if filter.source and record.source and record.source != filter.source:
        return False
    check_in = coerce_date(record.check_in)
    if filter.check_in_from and check_in is not None and check_in < filter.check_in_from:
        return False
    if filter.check_in_to and check_in is not None and check_in > filter.check_in_to:
        return False
    return True


def eligible_reservations(
    reservations: Iterable[ReservationRecord], filter: ReservationFilter | None = None
) -> Iterator[ReservationRecord]:
    """Yield reservations that count toward metrics."""
    for record in reservations:
        if record.is_excluded:
            continue
        if not record.check_in:
            continue
        if not _passes_filter(record, filter):
            continue
        yield record


def build_stay_nights(
    reservations: Iterable[ReservationRecord], filter: ReservationFilter | None = None
) -> list[StayNight]:
    """Expand each eligible reservation into one entry per night stayed."""
    nights: list[StayNight] = []
    for record in eligible_reservations(reservations, filter):
        if not record.nights or record.nights <= 0:
            continue
        start = coerce_date(record.check_in)
        if start is None:
            continue
        for offset in range(record.nights):
            nights.append(
                StayNight(
                    inn_id=record.inn_id,
                    reservation_id=record.id,
                    inn_name=record.inn_name,
                    source=record.source,
                    date=start + timedelta(days=offset),
                    status=record.status,
                )
            )
    return nights


def build_weekly_occupancy(stay_nights: Iterable[StayNight]) -> list[WeeklyOccupancyPoint]:
    """Group stay nights by inn and week; occupancy is capped at 1.0."""
    buckets: dict[tuple[uuid.UUID, WeekKey], WeeklyOccupancyPoint] = {}
    for night in stay_nights:
        bucket = week_key(night.date)
        if bucket.is_invalid:
            continue
        point = buckets.get((night.inn_id, bucket))
        if point is None:
            buckets[(night.inn_id, bucket)] = WeeklyOccupancyPoint(
                week_key=bucket.key,
                inn_id=night.inn_id,
                inn_name=night.inn_name,
                stayed_nights=1,
                occupancy=0.0,
                year=bucket.year,
                week=bucket.week,
            )
        else:
            point.stayed_nights += 1

    for point in buckets.values():
        point.occupancy = min(1.0, point.stayed_nights / DAYS_PER_WEEK)
    return sorted(buckets.values(), key=lambda point: (point.year, point.week))


def _check_in_buckets(
    reservations: Iterable[ReservationRecord], filter: ReservationFilter | None
) -> dict[tuple[uuid.UUID, WeekKey], list[ReservationRecord]]:
    grouped: dict[tuple[uuid.UUID, WeekKey], list[ReservationRecord]] = {}
    for record in eligible_reservations(reservations, filter):
        bucket = week_key(record.check_in)
        if bucket.is_invalid:
            continue
        grouped.setdefault((record.inn_id, bucket), []).append(record)
    return grouped


def build_weekly_adr(
    reservations: Iterable[ReservationRecord], filter: ReservationFilter | None = None
) -> list[WeeklyAdrPoint]:
    """Average rate per night by inn and check-in week.

    Multi-night stays count entirely toward their check-in week.
    """
    points: list[tuple[WeekKey, WeeklyAdrPoint]] = []
    for (inn_id, bucket), records in _check_in_buckets(reservations, filter).items():
        total_sale = sum(record.sale_amount or 0 for record in records)
        total_nights = sum(record.nights or 0 for record in records)
        points.append(
            (
                bucket,
                WeeklyAdrPoint(
                    week_key=bucket.key,
                    inn_id=inn_id,
                    inn_name=records[0].inn_name,
                    total_sale_amount=total_sale,
                    total_nights=total_nights,
                    adr=total_sale / total_nights if total_nights > 0 else 0.0,
                ),
            )
        )
    points.sort(key=lambda item: item[0])
    return [point for _, point in points]


def build_weekly_sales(
    reservations: Iterable[ReservationRecord], filter: ReservationFilter | None = None
) -> list[WeeklySalesPoint]:
    """Summed sale amount by inn and check-in week."""
    points: list[tuple[WeekKey, WeeklySalesPoint]] = []
    for (inn_id, bucket), records in _check_in_buckets(reservations, filter).items():
        points.append(
            (
                bucket,
                WeeklySalesPoint(
                    week_key=bucket.key,
                    inn_id=inn_id,
                    inn_name=records[0].inn_name,
                    total_sale_amount=sum(record.sale_amount or 0 for record in records),
                ),
            )
        )
    points.sort(key=lambda item: item[0])
    return [point for _, point in points]


PointT = TypeVar("PointT", WeeklyOccupancyPoint, WeeklyAdrPoint, WeeklySalesPoint)


def _zero_point(template: PointT, key: str) -> PointT:
    if isinstance(template, WeeklyOccupancyPoint):
        bucket = parse_week_key(key)
        return WeeklyOccupancyPoint(  # type: ignore[return-value]
            week_key=key,
            inn_id=template.inn_id,
            inn_name=template.inn_name,
            stayed_nights=0,
            occupancy=0.0,
            year=bucket.year,
            week=bucket.week,
        )
    if isinstance(template, WeeklyAdrPoint):
        return WeeklyAdrPoint(  # type: ignore[return-value]
            week_key=key,
            inn_id=template.inn_id,
            inn_name=template.inn_name,
            total_sale_amount=0,
            total_nights=0,
            adr=0.0,
        )
    return WeeklySalesPoint(  # type: ignore[return-value]
        week_key=key,
        inn_id=template.inn_id,
        inn_name=template.inn_name,
        total_sale_amount=0,
    )


def fill_week_range(points: Sequence[PointT], week_keys: Sequence[str]) -> list[PointT]:
    """Return one point per inn per key in ``week_keys``, zero where absent.

    Points outside ``week_keys`` are dropped. Output is ordered by week, then
    by the order inns first appear in ``points``.
    """
    by_inn: dict[uuid.UUID, dict[str, PointT]] = {}
    for point in points:
        by_inn.setdefault(point.inn_id, {})[point.week_key] = point

    filled: list[PointT] = []
    for key in week_keys:
        for inn_points in by_inn.values():
            point = inn_points.get(key)
            if point is None:
                template = next(iter(inn_points.values()))
                point = _zero_point(template, key)
            filled.append(point)
    return filled


class MetricKind(str, enum.Enum):
    """Weekly metric shown by a chart or an export."""

    OCCUPANCY = "occupancy"
    ADR = "adr"
    SALES = "sales"

    @property
    def title(self) -> str:
        return _EXPORT_LABELS[self][0]

    @property
    def value_header(self) -> str:
        return _EXPORT_LABELS[self][1]


_EXPORT_LABELS = {
    MetricKind.OCCUPANCY: ("稼働率", "宿泊日数"),
    MetricKind.ADR: ("ADR", "ADR"),
    MetricKind.SALES: ("売上", "売上"),
}
PERIOD_HEADER = "期間"

WeeklyPoint = WeeklyOccupancyPoint | WeeklyAdrPoint | WeeklySalesPoint


@dataclass(slots=True)
class YearCompareRow:
    """One week number with that week's value for every compared year."""

    week_label: str
    values: dict[int, int] = field(default_factory=dict)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, as charts display them."""
    return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))


def build_weekly_points(
    kind: MetricKind,
    reservations: Iterable[ReservationRecord],
    filter: ReservationFilter | None = None,
) -> list[WeeklyPoint]:
    if kind is MetricKind.OCCUPANCY:
        return list(build_weekly_occupancy(build_stay_nights(reservations, filter)))
    if kind is MetricKind.ADR:
        return list(build_weekly_adr(reservations, filter))
    return list(build_weekly_sales(reservations, filter))


def weekly_value(point: WeeklyPoint) -> int:
    """Value exported for a single week: nights, rounded ADR or yen."""
    if isinstance(point, WeeklyOccupancyPoint):
        return point.stayed_nights
    if isinstance(point, WeeklyAdrPoint):
        return round_half_up(point.adr)
    return point.total_sale_amount


def compare_value(point: WeeklyPoint) -> int:
    """Value plotted in the year comparison: occupancy percent, rounded ADR or yen."""
    if isinstance(point, WeeklyOccupancyPoint):
        return round_half_up(point.occupancy * 100)
    if isinstance(point, WeeklyAdrPoint):
        return round_half_up(point.adr)
    return point.total_sale_amount


def build_year_compare(
    points: Iterable[WeeklyPoint], years: Sequence[int]
) -> list[YearCompareRow]:
    """Pivot one inn's weekly points into rows ``1W`` to ``53W``, a column per year.

    Weeks without a point are 0. Points from other years are ignored.
    """
    values: dict[WeekKey, int] = {}
    for point in points:
        bucket = parse_week_key(point.week_key)
        if bucket.is_invalid or bucket.year not in years:
            continue
        values[bucket] = compare_value(point)
    return [
        YearCompareRow(
            week_label=f"{week}W",
            values={year: values.get(WeekKey(year, week), 0) for year in years},
        )
        for week in range(1, MAX_WEEK + 1)
    ]


def export_rows(
    kind: MetricKind,
    points: Iterable[WeeklyPoint],
    *,
    week_keys: Sequence[str],
    compare_years: Sequence[int] | None = None,
) -> list[list[str]]:
    """CSV rows (header first) of one inn's weekly metric.

    Without ``compare_years`` there is one row per key in ``week_keys``.  With
    it, the year comparison is flattened into one row per year and week.
    """
    rows = [[PERIOD_HEADER, kind.value_header]]
    points = list(points)
    if compare_years is None:
        by_key = {point.week_key: weekly_value(point) for point in points}
        rows.extend([format_week_range(key), str(by_key.get(key, 0))] for key in week_keys)
        return rows

    compared = build_year_compare(points, compare_years)
    for year in compare_years:
        for week, row in enumerate(compared, start=1):
            rows.append(
                [format_week_range(WeekKey(year, week).key), str(row.values[year])]
            )
    return rows
