"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, HandshakeId wrap the store-assigned integer keys
    - ExternalId is never the empty string: absent means None
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON/log extras without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
HandshakeId = NewType("HandshakeId", int)
ExternalId = NewType("ExternalId", str)


# ─── Enums ───────────────────────────────────────────────────────

class MatchSource(str, Enum):
    """Which lookup step matched an inbound identity to a stored user."""
    EXTERNAL_ID = "external_id"
    DISPLAY_NAME = "display_name"
    NONE = "none"


class ResolutionOutcome(str, Enum):
    """What resolve_or_create did to the store."""
    MATCHED = "matched"
    UPDATED = "updated"
    CREATED = "created"
