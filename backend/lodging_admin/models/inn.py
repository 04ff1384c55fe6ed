"""Registered lodging properties (inns)."""

from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lodging_admin.db.base import Base
from lodging_admin.models.mixins import TimestampMixin


def compose_display_name(name: str, tag: str | None) -> str:
    """Return the ``tag.name`` label used to match imported rows."""
    tag = (tag or "").strip()
    return f"{tag}.{name}" if tag else name


class Inn(TimestampMixin, Base):
    """A lodging unit whose reservations are imported and charted."""

    __tablename__ = "lodging_inns"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tag: Mapped[str | None] = mapped_column(String(64))
    display_name: Mapped[str | None] = mapped_column(String(320), index=True)
    address: Mapped[str | None] = mapped_column(String(512))
    map_url: Mapped[str | None] = mapped_column(String(1024))

    @property
    def label(self) -> str:
        return self.display_name or compose_display_name(self.name, self.tag)
