"""Weekly metric point schemas."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict


class _WeeklyPoint(BaseModel):
    week_key: str
    inn_id: uuid.UUID
    inn_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class WeeklyOccupancyRead(_WeeklyPoint):
    """Stayed nights and capped occupancy ratio for one inn-week."""

    stayed_nights: int
    occupancy: float
    year: int
    week: int


class WeeklyAdrRead(_WeeklyPoint):
    """Average daily rate for one inn-week."""

    total_sale_amount: int
    total_nights: int
    adr: float


class WeeklySalesRead(_WeeklyPoint):
    """Summed sales for one inn-week."""

    total_sale_amount: int


class WeekRange(BaseModel):
    """Ordered week keys for the dashboard x-axis."""

    weeks: list[str]


class YearCompareRead(BaseModel):
    """One week number with the value for each compared year."""

    week_label: str
    values: dict[int, int]

    model_config = ConfigDict(from_attributes=True)
