"""ORM models package export."""

from lodging_admin.models.inn import Inn, compose_display_name
from lodging_admin.models.reservation import (
    EXCLUDED_STATUSES,
    Reservation,
    ReservationStatus,
)

__all__ = [
    "EXCLUDED_STATUSES",
    "Inn",
    "Reservation",
    "ReservationStatus",
    "compose_display_name",
]
