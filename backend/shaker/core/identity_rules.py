"""Identity Rules — pure reconciliation of an inbound identity against a stored user.

Invariants:
    - A present stored external_id is never replaced by a different one
    - An absent stored external_id is filled from a non-empty inbound value
    - display_name always converges to the latest-seen value
    - Empty inbound external_id is equivalent to absent

Design Decisions:
    - Pure functions over (stored, inbound) pairs: the resolver service loads the
      row, asks reconcile() what to change, then persists the returned patch
    - Lookup priority is data (LOOKUP_ORDER), not control flow scattered in SQL
"""

from dataclasses import dataclass

from shaker.core.domain_types import ExternalId, MatchSource


# ID first: external IDs are stable, display names are not
LOOKUP_ORDER: tuple[MatchSource, ...] = (
    MatchSource.EXTERNAL_ID, MatchSource.DISPLAY_NAME,
)


@dataclass(frozen=True)
class InboundIdentity:
    """Identity signals carried by a request, already normalized."""
    external_id: ExternalId | None
    display_name: str


@dataclass(frozen=True)
class UserPatch:
    """Field values to write onto an existing user row."""
    external_id: ExternalId | None
    display_name: str


def normalize_external_id(value: str | None) -> ExternalId | None:
    """Map empty/missing external IDs to None."""
    if value is None or value == "":
        return None
    return ExternalId(value)


def build_inbound_identity(
    external_id: str | None, display_name: str,
) -> InboundIdentity:
    """Normalize raw request fields into an InboundIdentity."""
    return InboundIdentity(
        external_id=normalize_external_id(external_id),
        display_name=display_name,
    )


def lookup_steps(identity: InboundIdentity) -> list[MatchSource]:
    """Lookups to attempt for this identity, in priority order.

    The external-ID step is skipped when the inbound ID is absent.
    """
    return [
        source for source in LOOKUP_ORDER
        if source is not MatchSource.EXTERNAL_ID or identity.external_id is not None
    ]


def reconcile(
    stored_external_id: str | None,
    stored_display_name: str,
    inbound: InboundIdentity,
) -> UserPatch | None:
    """Decide how a matched user must change. Returns None when it is current.

    An update is due when the stored external_id is absent or the stored
    display_name differs from the inbound one.
    """
    stored_id = normalize_external_id(stored_external_id)
    if stored_id is not None and stored_display_name == inbound.display_name:
        return None

    new_external_id = stored_id if stored_id is not None else inbound.external_id
    if (
        new_external_id == stored_id
        and stored_display_name == inbound.display_name
    ):
        return None

    return UserPatch(
        external_id=new_external_id,
        display_name=inbound.display_name,
    )
