"""Schema exports."""

from lodging_admin.schemas.auth import PinLogin, SessionRead, Token
from lodging_admin.schemas.health import HealthRead
from lodging_admin.schemas.inn import InnCreate, InnRead, InnUpdate
from lodging_admin.schemas.metrics import (
    WeeklyAdrRead,
    WeeklyOccupancyRead,
    WeeklySalesRead,
    WeekRange,
    YearCompareRead,
)
from lodging_admin.schemas.reservation import ReservationRead

__all__ = [
    "HealthRead",
    "InnCreate",
    "InnRead",
    "InnUpdate",
    "PinLogin",
    "ReservationRead",
    "SessionRead",
    "Token",
    "WeekRange",
    "WeeklyAdrRead",
    "WeeklyOccupancyRead",
    "WeeklySalesRead",
    "YearCompareRead",
]
