"""Reservation schemas."""
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict


class ReservationRead(BaseModel):
    """Serialized reservation."""

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

    model_config = ConfigDict(from_attributes=True)
