"""Identity Resolver — maps (external_id, display_name) to exactly one durable User.

Invariants:
    - External-ID lookup always precedes display-name lookup ("ID wins silently")
    - A matched user is patched in place; its id never changes
    - Patches are committed before resolve_or_create returns
    - find_user never writes

Design Decisions:
    - Decisions delegated to core/identity_rules.py; this class only does IO
    - Insert conflicts on the UNIQUE external_id are treated as a lost race:
      roll back, retry the lookup once, reconcile whatever it finds
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shaker.core.domain_types import MatchSource, ResolutionOutcome
from shaker.core.errors import ErrorContext, StoreError
from shaker.core.identity_rules import (
    InboundIdentity, build_inbound_identity, lookup_steps, reconcile,
)
from shaker.models.user import User

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Finds, reconciles or creates users for inbound identity signals."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.last_outcome: ResolutionOutcome | None = None

    async def get_by_external_id(self, external_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.external_id == external_id),
        )
        return result.scalar_one_or_none()

    async def get_by_display_name(self, display_name: str) -> User | None:
        """Exact, case-sensitive name match. Oldest row wins on duplicates."""
        result = await self.db.execute(
            select(User)
            .where(User.display_name == display_name)
            .order_by(User.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_user(
        self, external_id: str | None, display_name: str,
    ) -> User | None:
        """Lookup-only resolution. Returns None when neither field matches."""
        user, _ = await self._lookup(
            build_inbound_identity(external_id, display_name),
        )
        return user

    async def resolve_or_create(
        self, external_id: str | None, display_name: str,
    ) -> User:
        """Return the user for this identity, patching or creating it as needed."""
        identity = build_inbound_identity(external_id, display_name)
        user, source = await self._lookup(identity)
        if user is not None:
            return await self._apply_reconciliation(user, identity, source)

        try:
            return await self._create(identity)
        except IntegrityError:
            # Another request inserted this external_id between lookup and insert
            await self.db.rollback()
            logger.warning(
                "User insert conflicted; retrying lookup",
                extra={"external_id": identity.external_id},
            )

        user, source = await self._lookup(identity)
        if user is None:
            raise StoreError(
                "User insert conflicted but no matching user was found",
                "commit",
                ErrorContext(
                    external_id=identity.external_id,
                    display_name=identity.display_name,
                ),
            )
        return await self._apply_reconciliation(user, identity, source)

    async def _lookup(
        self, identity: InboundIdentity,
    ) -> tuple[User | None, MatchSource]:
        for source in lookup_steps(identity):
            if source is MatchSource.EXTERNAL_ID:
                user = await self.get_by_external_id(identity.external_id)
            else:
                user = await self.get_by_display_name(identity.display_name)
            if user is not None:
                logger.debug(
                    f"Identity matched by {source.value}",
                    extra={"user_id": user.id},
                )
                return user, source
        return None, MatchSource.NONE

    async def _apply_reconciliation(
        self, user: User, identity: InboundIdentity, source: MatchSource,
    ) -> User:
        patch = reconcile(user.external_id, user.display_name, identity)
        if patch is None:
            self.last_outcome = ResolutionOutcome.MATCHED
            return user

        logger.info(
            f"Updating user matched by {source.value}: "
            f"{user.display_name!r} -> {patch.display_name!r}",
            extra={"user_id": user.id, "external_id": patch.external_id},
        )
        user.external_id = patch.external_id
        user.display_name = patch.display_name
        await self.db.commit()
        self.last_outcome = ResolutionOutcome.UPDATED
        return user

    async def _create(self, identity: InboundIdentity) -> User:
        user = User(
            external_id=identity.external_id,
            display_name=identity.display_name,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(
            f"Created user {user.display_name!r}",
            extra={"user_id": user.id, "external_id": user.external_id},
        )
        self.last_outcome = ResolutionOutcome.CREATED
        return user
