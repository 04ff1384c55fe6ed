"""Domain exceptions raised by lodging services."""

from __future__ import annotations

from collections.abc import Sequence

UNRESOLVED_SAMPLE_SIZE = 10


class LodgingError(RuntimeError):
    """Base class for lodging backend failures."""


class RepositoryError(LodgingError):
    """Raised when the backing store rejects a fetch, save or delete."""


class UnresolvedInnError(LodgingError):
    """Raised when imported rows reference inns that are not registered."""

    def __init__(self, labels: Sequence[str]) -> None:
        self.labels = list(dict.fromkeys(labels))
        sample = self.labels[:UNRESOLVED_SAMPLE_SIZE]
        message = (
            "No inn is registered for the following labels; register them first: "
            + ", ".join(sample)
        )
        remaining = len(self.labels) - len(sample)
        if remaining > 0:
            message += f" ... and {remaining} more"
        super().__init__(message)


class NotificationError(LodgingError):
    """Raised when the import notification webhook cannot be delivered."""


class AuthError(LodgingError):
    """Raised when a credential or session token is rejected."""


__all__ = [
    "AuthError",
    "LodgingError",
    "NotificationError",
    "RepositoryError",
    "UnresolvedInnError",
]
