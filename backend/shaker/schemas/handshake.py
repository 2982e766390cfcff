"""Handshake Schemas — response shape for recorded handshakes.

Invariants:
    - HandshakeResponse mirrors the persisted row, never the request
    - created_at serialized as ISO-8601

Design Decisions:
    - from_attributes: built straight from the ORM row returned by the Ledger
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class HandshakeResponse(BaseModel):
    """Handshake as persisted."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    world_name: str | None
    created_at: datetime
