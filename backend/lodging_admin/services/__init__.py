"""Service layer exports."""
from lodging_admin.services import (
    auth_service,
    csv_import_service,
    inn_service,
    metrics_service,
    notification_service,
    reconciliation_service,
    week_service,
)

__all__ = [
    "auth_service",
    "csv_import_service",
    "inn_service",
    "metrics_service",
    "notification_service",
    "reconciliation_service",
    "week_service",
]
