"""SQLAlchemy mixins for common table columns."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

POSITION_ENUM = Enum("attack", "defense", name="player_position", native_enum=False)


class CreatedAtMixin:
    """Creation timestamp, filled by the database unless set explicitly."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class TimestampMixin(CreatedAtMixin):
    """Creation and last-update timestamps for mutable rows."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
