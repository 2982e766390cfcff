"""Identity Resolver — verifies lookup priority, self-healing and race handling.

Invariants:
    - ID match wins over name match, silently
    - Matched users are patched in place; ids never change
    - find_user never writes
    - An insert conflict on external_id falls back to the existing row
"""

from sqlalchemy import select

from shaker.core.domain_types import MatchSource, ResolutionOutcome
from shaker.models.user import User
from shaker.services.identity_resolver import IdentityResolver


async def _all_users(db) -> list[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def test_creates_user_on_first_contact(test_db):
    resolver = IdentityResolver(test_db)
    user = await resolver.resolve_or_create("abc123", "Alice")

    assert user.id > 0
    assert user.external_id == "abc123"
    assert user.display_name == "Alice"
    assert user.created_at is not None
    assert resolver.last_outcome is ResolutionOutcome.CREATED


async def test_empty_external_id_stored_as_null(test_db):
    user = await IdentityResolver(test_db).resolve_or_create("", "Bob")
    assert user.external_id is None


async def test_same_identity_resolves_to_same_user(test_db):
    resolver = IdentityResolver(test_db)
    first = await resolver.resolve_or_create("abc123", "Alice")
    second = await resolver.resolve_or_create("abc123", "Alice")

    assert second.id == first.id
    assert resolver.last_outcome is ResolutionOutcome.MATCHED
    assert len(await _all_users(test_db)) == 1


async def test_renamed_user_keeps_id_and_takes_new_name(test_db):
    resolver = IdentityResolver(test_db)
    first = await resolver.resolve_or_create("abc123", "Alice")
    renamed = await resolver.resolve_or_create("abc123", "Alicia")

    assert renamed.id == first.id
    assert renamed.display_name == "Alicia"
    assert renamed.external_id == "abc123"
    assert resolver.last_outcome is ResolutionOutcome.UPDATED


async def test_name_only_user_gains_external_id(test_db):
    resolver = IdentityResolver(test_db)
    legacy = await resolver.resolve_or_create("", "Bob")
    healed = await resolver.resolve_or_create("xyz999", "Bob")

    assert healed.id == legacy.id
    assert healed.external_id == "xyz999"
    users = await _all_users(test_db)
    assert [(u.external_id, u.display_name) for u in users] == [("xyz999", "Bob")]


async def test_external_id_wins_over_name_match(test_db):
    resolver = IdentityResolver(test_db)
    alice = await resolver.resolve_or_create("abc123", "Alice")
    carol = await resolver.resolve_or_create("def456", "Carol")

    # Alice now uses Carol's old name; the ID decides
    resolved = await resolver.resolve_or_create("abc123", "Carol")

    assert resolved.id == alice.id
    assert resolved.display_name == "Carol"
    refreshed_carol = await resolver.get_by_external_id("def456")
    assert refreshed_carol.id == carol.id
    assert refreshed_carol.display_name == "Carol"


async def test_name_match_never_overwrites_present_external_id(test_db):
    resolver = IdentityResolver(test_db)
    alice = await resolver.resolve_or_create("abc123", "Alice")

    resolved = await resolver.resolve_or_create("other-id", "Alice")

    assert resolved.id == alice.id
    assert resolved.external_id == "abc123"
    assert len(await _all_users(test_db)) == 1


async def test_name_lookup_is_case_sensitive(test_db):
    resolver = IdentityResolver(test_db)
    await resolver.resolve_or_create("", "alice")
    await resolver.resolve_or_create("", "Alice")
    assert len(await _all_users(test_db)) == 2


async def test_find_user_does_not_create(test_db):
    resolver = IdentityResolver(test_db)
    assert await resolver.find_user("abc123", "Alice") is None
    assert await _all_users(test_db) == []


async def test_find_user_does_not_patch(test_db):
    resolver = IdentityResolver(test_db)
    await resolver.resolve_or_create("", "Bob")

    found = await resolver.find_user("xyz999", "Bob")

    assert found is not None
    assert found.external_id is None


async def test_find_user_falls_back_to_name(test_db):
    resolver = IdentityResolver(test_db)
    bob = await resolver.resolve_or_create("xyz999", "Bob")
    found = await resolver.find_user("unknown-id", "Bob")
    assert found.id == bob.id


async def test_insert_conflict_retries_lookup(test_db, db_manager, monkeypatch):
    async with db_manager.session() as other:
        winner = await IdentityResolver(other).resolve_or_create("race-1", "Racer")

    resolver = IdentityResolver(test_db)
    real_lookup = resolver._lookup
    calls = []

    async def stale_then_real(identity):
        # First lookup runs before the concurrent insert became visible
        calls.append(identity)
        if len(calls) == 1:
            return None, MatchSource.NONE
        return await real_lookup(identity)

    monkeypatch.setattr(resolver, "_lookup", stale_then_real)

    user = await resolver.resolve_or_create("race-1", "Racer Two")

    assert len(calls) == 2
    assert user.id == winner.id
    assert user.display_name == "Racer Two"
    assert resolver.last_outcome is ResolutionOutcome.UPDATED
    assert len(await _all_users(test_db)) == 1
