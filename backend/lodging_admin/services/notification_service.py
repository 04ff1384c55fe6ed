"""Import summary text for the chat notification webhook."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from lodging_admin.core.config import get_settings
from lodging_admin.core.errors import NotificationError
from lodging_admin.integrations.webhook_client import WebhookClient
from lodging_admin.models.reservation import ReservationStatus
from lodging_admin.services.reconciliation_service import ImportType, ReservationSummary

logger = logging.getLogger(__name__)

SEPARATOR = "────────────────────"

EMPTY_MESSAGES: dict[ImportType, str] = {
    ImportType.BOOKING: "No reservations were booked yesterday.",
    ImportType.CANCELLATION: "No reservations were cancelled yesterday.",
    ImportType.CHECKIN: "No matching reservations were found.",
}


def _format_date(value: date | None) -> str:
    return value.strftime("%Y/%m/%d") if value else "-"


def format_amount(amount: int | None) -> str:
    return f"¥{amount or 0:,}"


def format_summary(summary: ReservationSummary) -> str:
    nights = f"{summary.nights} nights" if summary.nights is not None else "- nights"
    return "\n".join(
        [
            f"Inn: {summary.inn_name or '-'} | {summary.source or '-'}",
            f":date: {_format_date(summary.check_in)} → {_format_date(summary.check_out)} ({nights})",
            f" Adults {summary.adults or 0} · Children {summary.children or 0}",
            f" {summary.rate_plan or '-'} | {format_amount(summary.sale_amount)}",
        ]
    )


def _section(header: str, summaries: Sequence[ReservationSummary]) -> list[str]:
    lines = ["", f"{header} ({len(summaries)})"]
    for index, summary in enumerate(summaries):
        if index:
            lines.append(SEPARATOR)
        lines.append(format_summary(summary))
    return lines


def build_notification_text(
    import_type: ImportType, summaries: Sequence[ReservationSummary]
) -> str:
    """Render active and cancelled reservations as one message."""
    if not summaries:
        return EMPTY_MESSAGES[import_type]

    cancelled = ReservationStatus.CANCELLED.value
    active = [summary for summary in summaries if summary.status != cancelled]
    cancellations = [summary for summary in summaries if summary.status == cancelled]

    lines: list[str] = []
    if active:
        lines.extend(_section(":pencil2: Reservations", active))
    if cancellations:
        lines.extend(_section(":heavy_multiplication_x: Cancellations", cancellations))
    return "\n".join(lines)


async def notify_import(
    import_type: ImportType,
    summaries: Sequence[ReservationSummary],
    *,
    client: WebhookClient | None = None,
) -> str:
    """Send the summary for a booking or cancellation import.

    Returns the delivered text. Raises :class:`NotificationError` on failure.
    """
    if client is None:
        settings = get_settings()
        client = WebhookClient(
            settings.notification_webhook_url,
            timeout=settings.notification_timeout_seconds,
        )
    text = build_notification_text(import_type, summaries)
    try:
        await client.post_text(text)
    except NotificationError:
        logger.exception("Import notification for %s batch failed", import_type.value)
        raise
    return text
