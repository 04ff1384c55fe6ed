"""CSV import result schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field

from lodging_admin.services.reconciliation_service import ImportType


class ImportResult(BaseModel):
    """Outcome of one CSV upload."""

    import_type: ImportType
    files: int
    rows: int
    malformed_rows: int
    reservations: int
    inserted: int
    updated: int
    notified: bool = False
    notification_error: str | None = None
    inn_labels: list[str] = Field(default_factory=list)
