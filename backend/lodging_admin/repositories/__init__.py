"""Repository implementations for inns and reservations."""

from .base import InnRepository, ReservationRepository
from .memory import (
    InMemoryInnRepository,
    InMemoryReservationRepository,
    InMemoryStore,
)
from .sql import SqlInnRepository, SqlReservationRepository

__all__ = [
    "InMemoryInnRepository",
    "InMemoryReservationRepository",
    "InMemoryStore",
    "InnRepository",
    "ReservationRepository",
    "SqlInnRepository",
    "SqlReservationRepository",
]
