"""Ledger — append-only handshake records and aggregate count queries.

Invariants:
    - Every handshake references a user produced by IdentityResolver
    - record_* return the row as persisted (server id and created_at), not the input
    - world_name stored verbatim; legacy handshakes carry no world
    - Count queries never raise for zero rows; lookup-only counts raise NotFoundError

Design Decisions:
    - Ledger owns its IdentityResolver over the same AsyncSession, so one
      request touches one session
    - COUNT(*) in SQL rather than len() of loaded rows
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shaker.core.domain_types import HandshakeId, UserId
from shaker.core.errors import ErrorContext, NotFoundError, StoreError
from shaker.models.handshake import Handshake
from shaker.models.user import User
from shaker.services.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)


class Ledger:
    """Handshake persistence and queries."""

    def __init__(self, db: AsyncSession, resolver: IdentityResolver | None = None):
        self.db = db
        self.resolver = resolver or IdentityResolver(db)

    # ─── Writes ──────────────────────────────────────────────────

    async def record_handshake(
        self, external_id: str | None, display_name: str, world_name: str | None,
    ) -> Handshake:
        """Resolve the user, then append one handshake for them."""
        user = await self.resolver.resolve_or_create(external_id, display_name)
        return await self._append(UserId(user.id), world_name)

    async def record_legacy(self, display_name: str) -> Handshake:
        """Name-only backfill: reuse or create the user by name, no world."""
        user = await self.resolver.get_by_display_name(display_name)
        if user is None:
            user = User(external_id=None, display_name=display_name)
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(
                f"Created legacy user {display_name!r}",
                extra={"user_id": user.id},
            )
        return await self._append(UserId(user.id), None)

    async def _append(self, user_id: UserId, world_name: str | None) -> Handshake:
        handshake = Handshake(user_id=user_id, world_name=world_name)
        self.db.add(handshake)
        await self.db.commit()

        stored = await self.get_handshake(HandshakeId(handshake.id))
        if stored is None:
            raise StoreError(
                f"Unable to retrieve newly-created handshake with ID {handshake.id}",
                "query",
                ErrorContext(user_id=user_id, handshake_id=handshake.id),
            )
        await self.db.refresh(stored)
        logger.info(
            "Recorded handshake",
            extra={"user_id": user_id, "handshake_id": stored.id},
        )
        return stored

    # ─── Reads ───────────────────────────────────────────────────

    async def get_user(self, user_id: UserId) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_handshake(self, handshake_id: HandshakeId) -> Handshake | None:
        result = await self.db.execute(
            select(Handshake).where(Handshake.id == handshake_id),
        )
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def list_handshakes(self) -> list[Handshake]:
        result = await self.db.execute(select(Handshake).order_by(Handshake.id))
        return list(result.scalars().all())

    async def list_user_display_names(self) -> list[str]:
        """One display name per user, in insertion order."""
        result = await self.db.execute(
            select(User.display_name).order_by(User.id),
        )
        return list(result.scalars().all())

    async def count_users(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(User))
        return result.scalar_one() or 0

    async def count_handshakes(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Handshake),
        )
        return result.scalar_one() or 0

    async def count_handshakes_for_user(self, user_id: UserId) -> int:
        """Handshakes recorded for one user; 0 when there are none."""
        result = await self.db.execute(
            select(func.count())
            .select_from(Handshake)
            .where(Handshake.user_id == user_id)
        )
        return result.scalar_one() or 0

    async def count_handshakes_for_identity(
        self, external_id: str | None, display_name: str,
    ) -> int:
        """Lookup-only variant: resolves without creating, raises on a miss."""
        user = await self.resolver.find_user(external_id, display_name)
        if user is None:
            raise NotFoundError(
                "User", external_id or display_name,
                ErrorContext(external_id=external_id or None, display_name=display_name),
            )
        return await self.count_handshakes_for_user(UserId(user.id))
