"""Weekly metric builder tests."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from lodging_admin.records import ReservationFilter, ReservationRecord
from lodging_admin.services import metrics_service

INN_A = uuid.UUID("00000000-0000-0000-0000-00000000000a")
INN_B = uuid.UUID("00000000-0000-0000-0000-00000000000b")


def _reservation(**changes) -> ReservationRecord:
    values = {
        "id": uuid.uuid4(),
        "inn_id": INN_A,
        "inn_name": "001.Seaside",
        "source": "Airbnb",
        "check_in": date(2025, 3, 10),
        "nights": 3,
        "sale_amount": 30000,
    }
    values.update(changes)
    return ReservationRecord(**values)


def test_seven_night_stay_inside_one_week_is_fully_occupied() -> None:
    # 2025 week 10 runs from March 5 to March 11.
    stay = _reservation(check_in=date(2025, 3, 5), nights=7)

    points = metrics_service.build_weekly_occupancy(metrics_service.build_stay_nights([stay]))

    assert len(points) == 1
    assert points[0].week_key == "2025 10W"
    assert points[0].stayed_nights == 7
    assert points[0].occupancy == 1.0


def test_occupancy_is_capped_when_stays_overlap() -> None:
    first = _reservation(check_in=date(2025, 3, 5), nights=7)
    second = _reservation(check_in=date(2025, 3, 5), nights=2)

    [point] = metrics_service.build_weekly_occupancy(
        metrics_service.build_stay_nights([first, second])
    )

    assert point.stayed_nights == 9
    assert point.occupancy == 1.0


def test_stay_nights_split_across_week_boundary() -> None:
    stay = _reservation(check_in=date(2025, 3, 10), nights=3)

    points = metrics_service.build_weekly_occupancy(metrics_service.build_stay_nights([stay]))

    assert [(point.week_key, point.stayed_nights) for point in points] == [
        ("2025 10W", 2),
        ("2025 11W", 1),
    ]
    assert points[0].occupancy == pytest.approx(2 / 7)


@pytest.mark.parametrize("status", ["cancelled", "blocked"])
def test_cancelled_and_blocked_reservations_are_excluded(status: str) -> None:
    excluded = _reservation(status=status)

    assert metrics_service.build_stay_nights([excluded]) == []
    assert metrics_service.build_weekly_adr([excluded]) == []
    assert metrics_service.build_weekly_sales([excluded]) == []


def test_adr_for_seaside_scenario() -> None:
    [point] = metrics_service.build_weekly_adr([_reservation()])

    assert point.week_key == "2025 10W"
    assert point.total_sale_amount == 30000
    assert point.total_nights == 3
    assert point.adr == 10000


def test_adr_with_zero_nights_is_zero() -> None:
    [point] = metrics_service.build_weekly_adr([_reservation(nights=0, sale_amount=5000)])

    assert point.adr == 0.0
    assert point.total_sale_amount == 5000


def test_adr_counts_long_stay_in_check_in_week_only() -> None:
    long_stay = _reservation(check_in=date(2025, 3, 10), nights=10, sale_amount=100000)

    points = metrics_service.build_weekly_adr([long_stay])

    assert [point.week_key for point in points] == ["2025 10W"]


def test_records_without_valid_check_in_are_skipped() -> None:
    undated = _reservation(check_in=None)

    assert metrics_service.build_stay_nights([undated]) == []
    assert metrics_service.build_weekly_sales([undated]) == []


def test_sales_are_summed_per_inn_and_sorted_by_week() -> None:
    records = [
        _reservation(check_in=date(2025, 4, 1), sale_amount=1000),
        _reservation(check_in=date(2025, 1, 2), sale_amount=2000),
        _reservation(check_in=date(2025, 1, 3), sale_amount=3000),
        _reservation(inn_id=INN_B, inn_name="002.Forest", check_in=date(2025, 1, 2)),
    ]

    points = metrics_service.build_weekly_sales(records)

    assert [(point.week_key, point.inn_id, point.total_sale_amount) for point in points] == [
        ("2025 1W", INN_A, 5000),
        ("2025 1W", INN_B, 30000),
        ("2025 13W", INN_A, 1000),
    ]


def test_source_filter_keeps_reservations_without_source() -> None:
    records = [
        _reservation(source="Airbnb"),
        _reservation(source="Booking.com"),
        _reservation(source=None),
    ]

    [point] = metrics_service.build_weekly_sales(records, ReservationFilter(source="Airbnb"))

    assert point.total_sale_amount == 60000


def test_inn_and_date_filters() -> None:
    records = [
        _reservation(check_in=date(2025, 3, 10)),
        _reservation(check_in=date(2025, 5, 10)),
        _reservation(inn_id=INN_B, check_in=date(2025, 3, 10)),
    ]
    filters = ReservationFilter(
        inn_id=INN_A, check_in_from=date(2025, 3, 1), check_in_to=date(2025, 3, 31)
    )

    points = metrics_service.build_weekly_sales(records, filters)

    assert [(point.inn_id, point.week_key) for point in points] == [(INN_A, "2025 10W")]


def test_fill_week_range_zero_fills_missing_weeks() -> None:
    points = metrics_service.build_weekly_adr([_reservation(check_in=date(2025, 1, 9))])

    filled = metrics_service.fill_week_range(points, ["2025 1W", "2025 2W", "2025 3W"])

    assert [point.week_key for point in filled] == ["2025 1W", "2025 2W", "2025 3W"]
    assert [point.adr for point in filled] == [0.0, 10000, 0.0]
    assert all(point.inn_id == INN_A for point in filled)


@pytest.mark.parametrize(("value", "expected"), [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (3, 3)])
def test_round_half_up(value: float, expected: int) -> None:
    assert metrics_service.round_half_up(value) == expected


def test_year_compare_pivots_weeks_by_year() -> None:
    reservations = [
        _reservation(check_in=date(2024, 3, 5), nights=3, sale_amount=10000),
        _reservation(check_in=date(2025, 3, 5), nights=2, sale_amount=25001),
        _reservation(check_in=date(2023, 3, 5), nights=1, sale_amount=999),
    ]
    years = [2024, 2025, 2026]

    sales = metrics_service.build_year_compare(
        metrics_service.build_weekly_points(metrics_service.MetricKind.SALES, reservations),
        years,
    )
    assert len(sales) == 53
    assert sales[0].week_label == "1W"
    assert sales[9].week_label == "10W"
    assert sales[9].values == {2024: 10000, 2025: 25001, 2026: 0}
    assert sum(sum(row.values.values()) for row in sales) == 35001

    adr = metrics_service.build_year_compare(
        metrics_service.build_weekly_points(metrics_service.MetricKind.ADR, reservations),
        years,
    )
    # 25001 / 2 = 12500.5 rounds up.
    assert adr[9].values == {2024: 3333, 2025: 12501, 2026: 0}

    occupancy = metrics_service.build_year_compare(
        metrics_service.build_weekly_points(metrics_service.MetricKind.OCCUPANCY, reservations),
        years,
    )
    # 3 of 7 nights is 42.857 percent, 2 of 7 is 28.571.
    assert occupancy[9].values == {2024: 43, 2025: 29, 2026: 0}


def test_export_rows_per_dashboard_week() -> None:
    points = metrics_service.build_weekly_points(
        metrics_service.MetricKind.OCCUPANCY, [_reservation(check_in=date(2025, 3, 5), nights=3)]
    )

    rows = metrics_service.export_rows(
        metrics_service.MetricKind.OCCUPANCY,
        points,
        week_keys=["2025 9W", "2025 10W"],
    )

    assert rows == [
        ["期間", "宿泊日数"],
        ["2025/2/26~3/4", "0"],
        ["2025/3/5~3/11", "3"],
    ]


def test_export_rows_flatten_year_compare() -> None:
    points = metrics_service.build_weekly_points(
        metrics_service.MetricKind.ADR,
        [_reservation(check_in=date(2025, 1, 1), nights=3, sale_amount=10000)],
    )

    rows = metrics_service.export_rows(
        metrics_service.MetricKind.ADR,
        points,
        week_keys=[],
        compare_years=[2024, 2025],
    )

    assert rows[0] == ["期間", "ADR"]
    assert len(rows) == 1 + 2 * 53
    assert rows[1] == ["2024/1/1~1/7", "0"]
    assert rows[54] == ["2025/1/1~1/7", "3333"]
    assert rows[-1] == ["2025/12/31~12/31", "0"]
