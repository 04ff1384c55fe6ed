"""CSV normalization tests."""

from __future__ import annotations

from datetime import date

import pytest

from lodging_admin.services.csv_import_service import (
    EXCLUDED_COLUMNS,
    normalize_source,
    normalize_status,
    parse_csv_text,
    parse_documents,
    parse_number,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("手動でインポート", "Unknown OTA"),
        ("手動作成", "Self-booked"),
        ("AirHost Direct", "Self-booked"),
        ("airhost", "Self-booked"),
        ("Airbnb", "Airbnb"),
        ("  Booking.com ", "Booking.com"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_source(raw: str | None, expected: str | None) -> None:
    assert normalize_source(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("システムキャンセル", "cancelled"),
        ("キャンセル", "cancelled"),
        ("ブロックされた", "blocked"),
        ("確認済み", None),
        ("保留", "保留"),
        (None, None),
    ],
)
def test_normalize_status(raw: str | None, expected: str | None) -> None:
    assert normalize_status(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("30000", 30000),
        ("30,000", 30000),
        ("¥12,000", 12000),
        ("-500", -500),
        ("2.0", 2),
        ("2.5", None),
        ("1e20", None),
        ("1e1000000", None),
        ("2147483647", 2147483647),
        ("abc", None),
        ("NaN", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_number_returns_none_on_failure(raw: str | None, expected: int | None) -> None:
    assert parse_number(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("2.5", 3), ("2.4", 2), ("1000.5", 1001), ("2147483647.5", None)],
)
def test_parse_number_rounds_amounts_half_up(raw: str, expected: int | None) -> None:
    assert parse_number(raw, round_fraction=True) == expected


def test_parse_csv_text_strips_bom_and_blank_lines() -> None:
    rows = parse_csv_text("\ufeffa,b\n\n1,2\n,\n")
    assert rows == [["a", "b"], ["1", "2"]]


def test_parse_documents_maps_known_columns(build_csv) -> None:
    text = build_csv({"AirHost予約ID": " AH-1 ", "予約サイト": "手動作成"})

    batch = parse_documents([text])

    assert batch.total_rows == 1
    assert batch.malformed_rows == 0
    assert list(batch.inns) == ["001.Seaside"]
    assert batch.inns["001.Seaside"].tag == "001"
    [draft] = batch.reservations
    assert draft.inn_label == "001.Seaside"
    assert draft.external_id == "AH-1"
    assert draft.source == "Self-booked"
    assert draft.check_in == date(2025, 3, 10)
    assert draft.check_out == date(2025, 3, 13)
    assert draft.nights == 3
    assert draft.sale_amount == 30000
    assert draft.status is None
    assert draft.guest_name == "Hanako Yamada"
    assert "電話番号" in EXCLUDED_COLUMNS


def test_rows_with_wrong_column_count_are_counted_as_malformed(build_csv) -> None:
    text = build_csv({"AirHost予約ID": "AH-1"}) + "001.Seaside,001,Airbnb\n"

    batch = parse_documents([text])

    assert batch.total_rows == 2
    assert batch.malformed_rows == 1
    assert len(batch.reservations) == 1


def test_unparseable_values_become_none(build_csv) -> None:
    text = build_csv({"チェックイン": "someday", "販売": "n/a", "合計日数": ""})

    [draft] = parse_documents([text]).reservations

    assert draft.check_in is None
    assert draft.sale_amount is None
    assert draft.nights is None


def test_parse_documents_merges_files(build_csv) -> None:
    first = build_csv({"AirHost予約ID": "AH-1"})
    second = build_csv({"AirHost予約ID": "AH-2", "物件名": "002.Forest", "物件タグ": "002"})

    batch = parse_documents([first, second, ""])

    assert batch.total_rows == 2
    assert sorted(batch.inns) == ["001.Seaside", "002.Forest"]
    assert [draft.external_id for draft in batch.reservations] == ["AH-1", "AH-2"]


def test_fractional_counts_are_rejected_and_amounts_rounded(build_csv) -> None:
    text = build_csv({"合計日数": "2.5", "ゲスト数": "1.5", "販売": "1000.5"})

    [draft] = parse_documents([text]).reservations

    assert draft.nights is None
    assert draft.guest_count is None
    assert draft.sale_amount == 1001


def test_out_of_range_amount_becomes_none(build_csv) -> None:
    [draft] = parse_documents([build_csv({"販売": "1e20"})]).reservations

    assert draft.sale_amount is None


def test_rows_without_inn_name_are_dropped_silently(build_csv) -> None:
    text = build_csv(
        {"AirHost予約ID": "AH-1"},
        {"AirHost予約ID": "AH-2", "物件名": "  ", "物件タグ": "009"},
    )

    batch = parse_documents([text])

    assert batch.total_rows == 2
    assert batch.malformed_rows == 0
    assert [draft.external_id for draft in batch.reservations] == ["AH-1"]
    assert list(batch.inns) == ["001.Seaside"]


def test_first_tag_wins_for_repeated_inn_name(build_csv) -> None:
    text = build_csv(
        {"AirHost予約ID": "AH-1", "物件タグ": "001"},
        {"AirHost予約ID": "AH-2", "物件タグ": "999"},
    )

    batch = parse_documents([text])

    assert batch.inns["001.Seaside"].tag == "001"
    assert len(batch.reservations) == 2
