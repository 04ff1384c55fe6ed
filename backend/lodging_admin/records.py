"""Plain records passed between services and repositories."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date

from lodging_admin.models.inn import compose_display_name
from lodging_admin.models.reservation import EXCLUDED_STATUSES


@dataclass(slots=True)
class InnRecord:
    """Registered inn as seen by the reconciliation layer."""

    id: uuid.UUID
    name: str
    tag: str | None = None
    display_name: str | None = None
    address: str | None = None
    map_url: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or compose_display_name(self.name, self.tag)


@dataclass(slots=True)
class ReservationRecord:
    """Persisted reservation, independent of the storage backend."""

    id: uuid.UUID
    inn_id: uuid.UUID
    inn_name: str | None = None
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

    @property
    def is_excluded(self) -> bool:
        """Cancelled and blocked stays never count toward metrics."""
        return self.status in EXCLUDED_STATUSES


@dataclass(slots=True)
class ReservationFilter:
    """Query filters shared by the reservation list and the metrics builders."""

    inn_id: uuid.UUID | None = None
    source: str | None = None
    check_in_from: date | None = None
    check_in_to: date | None = None
    search_text: str | None = None

    def matches_search(self, record: ReservationRecord) -> bool:
        if not self.search_text or not self.search_text.strip():
            return True
        needle = self.search_text.strip().lower()
        haystack = f"{record.source or ''} {record.rate_plan or ''}".lower()
        return needle in haystack


RESERVATION_FIELDS: tuple[str, ...] = (
    "id",
    "inn_id",
    "inn_name",
    "source",
    "external_id",
    "check_in",
    "check_out",
    "nights",
    "guest_count",
    "adults",
    "children",
    "infants",
    "nationality",
    "booking_date",
    "sale_amount",
    "status",
    "rate_plan",
)

INN_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "tag",
    "display_name",
    "address",
    "map_url",
)
