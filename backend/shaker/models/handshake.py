"""Handshake ORM — one recorded interaction between a user and a world.

Invariants:
    - Always belongs to a User (user_id FK, indexed)
    - world_name stored verbatim; NULL only for legacy imports
    - Rows are append-only: never updated, never deleted

Design Decisions:
    - Index on user_id: per-user counts are the hot read path
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from shaker.db.base import Base


class Handshake(Base):
    """Handshake that has occurred."""
    __tablename__ = "handshakes"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    world_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
