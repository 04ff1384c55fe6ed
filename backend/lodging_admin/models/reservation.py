"""Imported lodging reservations."""
from __future__ import annotations

import enum
import uuid
from datetime import date

from sqlalchemy import Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lodging_admin.db.base import Base
from lodging_admin.models.mixins import TimestampMixin


class ReservationStatus(str, enum.Enum):
    """Normalized non-default lifecycle states. Confirmed is stored as NULL."""

    CANCELLED = "cancelled"
    BLOCKED = "blocked"


EXCLUDED_STATUSES = frozenset(
    {ReservationStatus.CANCELLED.value, ReservationStatus.BLOCKED.value}
)


class Reservation(TimestampMixin, Base):
    """One guest stay as exported by the channel manager."""

    __tablename__ = "lodging_reservations"
    __table_args__ = (Index("ix_lodging_reservations_inn_check_in", "inn_id", "check_in"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    # No foreign key: deleting an inn leaves its reservations unresolved, not removed.
    inn_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    inn_name: Mapped[str | None] = mapped_column(String(320))
    source: Mapped[str | None] = mapped_column(String(255))
    external_id: Mapped[str | None] = mapped_column(String(128), unique=True)
    check_in: Mapped[date | None] = mapped_column(Date)
    check_out: Mapped[date | None] = mapped_column(Date)
    nights: Mapped[int | None] = mapped_column(Integer)
    guest_count: Mapped[int | None] = mapped_column(Integer)
    adults: Mapped[int | None] = mapped_column(Integer)
    children: Mapped[int | None] = mapped_column(Integer)
    infants: Mapped[int | None] = mapped_column(Integer)
    nationality: Mapped[str | None] = mapped_column(String(64))
    booking_date: Mapped[date | None] = mapped_column(Date)
    sale_amount: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str | None] = mapped_column(String(64))
    rate_plan: Mapped[str | None] = mapped_column(String(255))
