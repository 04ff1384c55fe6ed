"""CSV upload endpoint for reservation exports."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from lodging_admin.api import deps
from lodging_admin.core.errors import NotificationError
from lodging_admin.repositories import InnRepository, ReservationRepository
from lodging_admin.schemas.imports import ImportResult
from lodging_admin.services import notification_service
from lodging_admin.services.auth_service import Session
from lodging_admin.services.csv_import_service import parse_documents
from lodging_admin.services.reconciliation_service import ImportType, import_reservations

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_csv(upload: UploadFile) -> bool:
    return bool(upload.filename) and upload.filename.lower().endswith(".csv")


@router.post("", response_model=ImportResult, summary="Import reservation CSV exports")
async def import_csv_files(
    files: Annotated[list[UploadFile], File(description="Exported reservation CSV files")],
    inn_repository: Annotated[InnRepository, Depends(deps.get_inn_repository)],
    reservation_repository: Annotated[
        ReservationRepository, Depends(deps.get_reservation_repository)
    ],
    _: Annotated[Session, Depends(deps.get_current_session)],
    import_type: ImportType = ImportType.CHECKIN,
    dry_run: bool = False,
) -> ImportResult:
    uploads = [upload for upload in files if _is_csv(upload)]
    skipped = len(files) - len(uploads)
    if skipped:
        logger.info("Ignoring %d non-CSV uploads", skipped)
    if not uploads:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No CSV files were uploaded"
        )

    texts = [(await upload.read()).decode("utf-8-sig", errors="replace") for upload in uploads]
    batch = parse_documents(texts)

    result = await import_reservations(
        batch.reservations,
        inn_repository=inn_repository,
        reservation_repository=reservation_repository,
        import_type=import_type,
        dry_run=dry_run,
    )

    response = ImportResult(
        import_type=import_type,
        files=len(uploads),
        rows=batch.total_rows,
        malformed_rows=batch.malformed_rows,
        reservations=len(result.reservations),
        inserted=result.inserted,
        updated=result.updated,
        inn_labels=sorted(batch.inns),
    )
    if import_type.notifies and not dry_run:
        try:
            await notification_service.notify_import(import_type, result.summaries)
        except NotificationError as exc:
            response.notification_error = str(exc)
        else:
            response.notified = True
    return response
