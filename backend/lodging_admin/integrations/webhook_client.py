"""Incoming-webhook client for chat notifications."""

from __future__ import annotations

import logging

import httpx

from lodging_admin.core.errors import NotificationError

logger = logging.getLogger(__name__)


class WebhookClient:
    """Post plain-text messages to a chat incoming webhook."""

    def __init__(
        self,
        webhook_url: str | None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._webhook_url)

    async def post_text(self, text: str) -> None:
        """Deliver ``text``; any failure raises :class:`NotificationError`."""
        if not self._webhook_url:
            raise NotificationError("Notification webhook URL is not configured")
        if not text:
            raise NotificationError("Notification text is empty")
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._webhook_url, json={"text": text})
        except httpx.HTTPError as exc:
            raise NotificationError(f"Failed to send notification: {exc}") from exc
        if not response.is_success:
            raise NotificationError(
                f"Notification webhook responded with status {response.status_code}"
            )
        logger.info("Delivered import notification (%d chars)", len(text))
