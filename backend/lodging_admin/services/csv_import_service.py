"""Parse channel-manager CSV exports into reservation drafts.

Every column the importer reads is listed in :data:`COLUMN_MAP`; columns that
carry guest contact details, payment internals or free-text comments are
listed in :data:`EXCLUDED_COLUMNS` and are never read, even when present.
The guest name is read for notification text only and is not persisted.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from lodging_admin.models.reservation import ReservationStatus
from lodging_admin.services.week_service import coerce_date

logger = logging.getLogger(__name__)

COL_INN_NAME = "物件名"
COL_INN_TAG = "物件タグ"
COL_GUEST_NAME = "ゲスト名"
COL_LODGER_NAME = "宿泊者名"

COLUMN_MAP: dict[str, str] = {
    "予約サイト": "source",
    "AirHost予約ID": "external_id",
    "チェックイン": "check_in",
    "チェックアウト": "check_out",
    "合計日数": "nights",
    "ゲスト数": "guest_count",
    "大人": "adults",
    "子供": "children",
    "幼児": "infants",
    "国籍": "nationality",
    "予約日": "booking_date",
    "販売": "sale_amount",
    "料金プラン": "rate_plan",
    "状態": "status",
}

EXCLUDED_COLUMNS: frozenset[str] = frozenset(
    {
        "チャンネル予約ID",
        "部屋番号",
        "電話番号",
        "メールアドレス",
        "ゲストアドレス",
        "チェックイン状態",
        "支払い済み",
        "通貨",
        "OTA サービス料",
        "受取金",
        "支払済み（補助金/クーポン）",
        "OTA 決済",
        "クレジット",
        "現金",
        "未収",
        "クリーニング代",
        "サポート料金",
        "コメント",
        "説明",
        "決済手数料",
        "予約エンジンクーポン",
        "更新日時",
        "ルームタイプメニュー",
        "キャンセル",
    }
)

_COUNT_FIELDS = {"nights", "guest_count", "adults", "children", "infants"}
_AMOUNT_FIELDS = {"sale_amount"}
_DATE_FIELDS = {"check_in", "check_out", "booking_date"}

# Largest magnitude that fits the 32-bit integer columns.
MAX_NUMBER = Decimal(2**31 - 1)

SOURCE_MANUAL_IMPORT = "手動でインポート"
SOURCE_MANUAL_MARKERS = ("手動作成", "airhost")
SOURCE_UNKNOWN_OTA = "Unknown OTA"
SOURCE_SELF_BOOKED = "Self-booked"

_STATUS_MAP: dict[str, str | None] = {
    "システムキャンセル": ReservationStatus.CANCELLED.value,
    "キャンセル": ReservationStatus.CANCELLED.value,
    "ブロックされた": ReservationStatus.BLOCKED.value,
    "確認済み": None,
}


@dataclass(slots=True)
class InnDraft:
    """An inn label seen in an import, not yet matched to a registered inn."""

    name: str
    tag: str | None = None


@dataclass(slots=True)
class ReservationDraft:
    """A normalized CSV row; the inn is referenced by its raw label."""

    inn_label: str
    source: str | None = None
    external_id: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    nights: int | None = None
    guest_count: int | None = None
    adults: int | None = None
    children: int | None = None
    infants: int | None = None
    nationality: str | None = None
    booking_date: date | None = None
    sale_amount: int | None = None
    status: str | None = None
    rate_plan: str | None = None
    guest_name: str | None = None


@dataclass(slots=True)
class ParsedBatch:
    """Output of one or more parsed CSV documents."""

    inns: dict[str, InnDraft] = field(default_factory=dict)
    reservations: list[ReservationDraft] = field(default_factory=list)
    malformed_rows: int = 0
    total_rows: int = 0

    def merge(self, other: ParsedBatch) -> None:
        for name, inn in other.inns.items():
            self.inns.setdefault(name, inn)
        self.reservations.extend(other.reservations)
        self.malformed_rows += other.malformed_rows
        self.total_rows += other.total_rows


def normalize_source(raw: str | None) -> str | None:
    """Collapse manual/partner-tool channel labels."""
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    if trimmed == SOURCE_MANUAL_IMPORT:
        return SOURCE_UNKNOWN_OTA
    lowered = trimmed.lower()
    if any(marker in lowered for marker in SOURCE_MANUAL_MARKERS):
        return SOURCE_SELF_BOOKED
    return trimmed


def normalize_status(raw: str | None) -> str | None:
    """Map export status labels onto cancelled / blocked / confirmed (None)."""
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    if trimmed in _STATUS_MAP:
        return _STATUS_MAP[trimmed]
    return trimmed


def parse_number(value: str | None, *, round_fraction: bool = False) -> int | None:
    """Parse a permissive number, returning ``None`` rather than raising.

    Fractional values are rounded half-up when ``round_fraction`` is set and
    rejected otherwise. Values outside the storable range are rejected.
    """
    if value is None:
        return None
    cleaned = value.strip().replace(",", "").replace("¥", "").replace("￥", "")
    if not cleaned:
        return None
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not number.is_finite() or abs(number) > MAX_NUMBER:
        return None
    integral = number.to_integral_value(rounding=ROUND_HALF_UP)
    if integral != number and not round_fraction:
        return None
    return int(integral)


def parse_csv_text(text: str) -> list[list[str]]:
    """Split CSV text into rows, skipping blank lines."""
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text, newline=""))
    return [row for row in reader if row and any(cell.strip() for cell in row)]


def _cell(row: Sequence[str], index: int | None) -> str | None:
    if index is None:
        return None
    value = row[index].strip()
    return value or None


def map_rows(rows: Sequence[Sequence[str]]) -> ParsedBatch:
    """Turn header + data rows into inn and reservation drafts."""
    batch = ParsedBatch()
    if len(rows) <= 1:
        return batch

    header, *data_rows = rows
    positions: dict[str, int] = {}
    for index, name in enumerate(header):
        name = name.strip()
        if name in EXCLUDED_COLUMNS or name in positions:
            continue
        positions[name] = index

    guest_name_index = positions.get(COL_GUEST_NAME, positions.get(COL_LODGER_NAME))
    batch.total_rows = len(data_rows)

    for row in data_rows:
        if len(row) != len(header):
            batch.malformed_rows += 1
            continue

        inn_label = _cell(row, positions.get(COL_INN_NAME))
        if inn_label is None:
            continue
        if inn_label not in batch.inns:
            batch.inns[inn_label] = InnDraft(
                name=inn_label, tag=_cell(row, positions.get(COL_INN_TAG))
            )

        values: dict[str, object] = {}
        for column, attr in COLUMN_MAP.items():
            raw = _cell(row, positions.get(column))
            if attr in _COUNT_FIELDS:
                values[attr] = parse_number(raw)
            elif attr in _AMOUNT_FIELDS:
                values[attr] = parse_number(raw, round_fraction=True)
            elif attr in _DATE_FIELDS:
                values[attr] = coerce_date(raw)
            else:
                values[attr] = raw
        values["source"] = normalize_source(values["source"])  # type: ignore[arg-type]
        values["status"] = normalize_status(values["status"])  # type: ignore[arg-type]

        batch.reservations.append(
            ReservationDraft(
                inn_label=inn_label,
                guest_name=_cell(row, guest_name_index),
                **values,  # type: ignore[arg-type]
            )
        )

    if batch.malformed_rows:
        logger.info(
            "Dropped %d of %d CSV rows with a column count different from the header",
            batch.malformed_rows,
            batch.total_rows,
        )
    return batch


def parse_documents(texts: Iterable[str]) -> ParsedBatch:
    """Parse and merge several exported CSV documents."""
    batch = ParsedBatch()
    for text in texts:
        batch.merge(map_rows(parse_csv_text(text)))
    return batch
