"""Database model for stored report templates."""

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import DateTime, String, Text, Uuid, event
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

try:
    _JAKARTA = ZoneInfo("Asia/Jakarta")
except (ZoneInfoNotFoundError, ValueError):
    _JAKARTA = timezone(timedelta(hours=7), "WIB")


def jakarta_now() -> datetime:
    """Current time in the Asia/Jakarta zone."""
    return datetime.now(_JAKARTA)


class Base(DeclarativeBase):
    """Declarative base for all models."""


class TemplateType(str, Enum):
    """Kinds of template files."""

    EXCEL = "excel"
    DOCX = "docx"


class Template(Base):
    """A stored template file; deletion is soft, via ``deleted_at``."""

    __tablename__ = "templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_type: Mapped[str] = mapped_column(String(255), nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False)

    @validates("template_type")
    def _normalise_type(self, key, value):
        return value.value if isinstance(value, TemplateType) else value


@event.listens_for(Template, "before_insert")
def _before_insert(mapper, connection, target):
    target.id = uuid.uuid4()
    now = jakarta_now()
    target.created_at = now
    target.updated_at = now


@event.listens_for(Template, "before_update")
def _before_update(mapper, connection, target):
    target.updated_at = jakarta_now()