"""Integration shortcuts."""

from .webhook_client import WebhookClient

__all__ = ["WebhookClient"]
