"""Merge imported reservation drafts into the reservation store.

Drafts are matched to persisted reservations by external booking id and to
registered inns by display label.  A batch containing any label that does
not resolve to an inn is rejected as a whole; nothing from it is written.
"""

from __future__ import annotations

import enum
import logging
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from lodging_admin.core.errors import UnresolvedInnError
from lodging_admin.records import InnRecord, ReservationRecord
from lodging_admin.repositories.base import InnRepository, ReservationRepository
from lodging_admin.services.csv_import_service import ReservationDraft

logger = logging.getLogger(__name__)


class ImportType(str, enum.Enum):
    """Which export an import batch came from."""

    CHECKIN = "checkin"
    BOOKING = "booking"
    CANCELLATION = "cancellation"

    @property
    def notifies(self) -> bool:
        return self is not ImportType.CHECKIN


@dataclass(slots=True)
class ReservationSummary:
    """Per-reservation view used for the import notification text."""

    inn_name: str | None
    source: str | None
    check_in: date | None
    check_out: date | None
    nights: int | None
    adults: int | None
    children: int | None
    rate_plan: str | None
    sale_amount: int | None
    status: str | None
    guest_name: str | None = None


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of reconciling one batch against the current store."""

    reservations: list[ReservationRecord] = field(default_factory=list)
    summaries: list[ReservationSummary] = field(default_factory=list)
    unresolved_labels: list[str] = field(default_factory=list)
    inserted: int = 0
    updated: int = 0


def normalize_external_id(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def reconcile(
    drafts: Iterable[ReservationDraft],
    inns: Sequence[InnRecord],
    existing: Sequence[ReservationRecord],
    *,
    import_type: ImportType = ImportType.CHECKIN,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> ReconcileResult:
    """Resolve ids and inns for ``drafts`` without touching storage."""
    inns_by_label = {inn.label: inn for inn in inns}
    stored_by_external_id: dict[str, ReservationRecord] = {}
    for record in existing:
        external_id = normalize_external_id(record.external_id)
        if external_id is not None:
            stored_by_external_id[external_id] = record

    minted: dict[str, uuid.UUID] = {}
    resolved: dict[uuid.UUID, ReservationRecord] = {}
    result = ReconcileResult()
    unresolved: dict[str, None] = {}

    for draft in drafts:
        external_id = normalize_external_id(draft.external_id)
        stored = stored_by_external_id.get(external_id) if external_id else None
        if stored is not None:
            reservation_id = stored.id
        elif external_id in minted:
            reservation_id = minted[external_id]
        elif external_id is not None:
            reservation_id = minted[external_id] = id_factory()
        else:
            reservation_id = id_factory()

        inn = inns_by_label.get(draft.inn_label)
        if inn is None:
            unresolved.setdefault(draft.inn_label, None)
            continue

        sale_amount = draft.sale_amount
        notified_amount = sale_amount
        if import_type is ImportType.CANCELLATION:
            previous = stored.sale_amount if stored is not None else None
            basis = previous if previous is not None else sale_amount
            notified_amount = -basis if basis is not None else None
            sale_amount = 0

        if reservation_id not in resolved:
            if stored is not None:
                result.updated += 1
            else:
                result.inserted += 1
        resolved[reservation_id] = ReservationRecord(
            id=reservation_id,
            inn_id=inn.id,
            inn_name=draft.inn_label,
            source=draft.source,
            external_id=external_id,
            check_in=draft.check_in,
            check_out=draft.check_out,
            nights=draft.nights,
            guest_count=draft.guest_count,
            adults=draft.adults,
            children=draft.children,
            infants=draft.infants,
            nationality=draft.nationality,
            booking_date=draft.booking_date,
            sale_amount=sale_amount,
            status=draft.status,
            rate_plan=draft.rate_plan,
        )
        result.summaries.append(
            ReservationSummary(
                inn_name=draft.inn_label,
                source=draft.source,
                check_in=draft.check_in,
                check_out=draft.check_out,
                nights=draft.nights,
                adults=draft.adults,
                children=draft.children,
                rate_plan=draft.rate_plan,
                sale_amount=notified_amount,
                status=draft.status,
                guest_name=draft.guest_name,
            )
        )

    result.reservations = list(resolved.values())
    result.unresolved_labels = list(unresolved)
    return result


async def import_reservations(
    drafts: Sequence[ReservationDraft],
    *,
    inn_repository: InnRepository,
    reservation_repository: ReservationRepository,
    import_type: ImportType = ImportType.CHECKIN,
    dry_run: bool = False,
) -> ReconcileResult:
    """Reconcile ``drafts`` against the current store and persist them.

    Raises :class:`UnresolvedInnError` before any write when a draft's inn
    label matches no registered inn.
    """
    inns = await inn_repository.list_all()
    existing = await reservation_repository.find()
    result = reconcile(drafts, inns, existing, import_type=import_type)

    if result.unresolved_labels:
        logger.warning(
            "Rejected import of %d rows: %d unresolved inn labels",
            len(drafts),
            len(result.unresolved_labels),
        )
        raise UnresolvedInnError(result.unresolved_labels)

    if dry_run:
        logger.info(
            "Dry run: %d reservations would be inserted, %d updated",
            result.inserted,
            result.updated,
        )
        return result

    await reservation_repository.save_many(result.reservations)
    logger.info(
        "Imported %s batch: %d inserted, %d updated",
        import_type.value,
        result.inserted,
        result.updated,
    )
    return result
