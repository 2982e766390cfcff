"""User ORM — a platform user identified by external ID and/or display name.

Invariants:
    - id is an integer primary key assigned by the store, never changes
    - external_id is NULL when unknown; UNIQUE when present
    - display_name is the last-seen name (mutable, not unique)
    - created_at set once on insert

Design Decisions:
    - UNIQUE external_id: concurrent first-contacts for one ID collide on insert
      and the resolver retries its lookup instead of creating a duplicate
    - No cascade to handshakes: users are never deleted
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from shaker.db.base import Base


class User(Base):
    """User that has shaken hands."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("external_id", name="uq_users_external_id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    external_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
