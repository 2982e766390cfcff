"""Token Authentication — optional shared-secret check on every ledger route.

Invariants:
    - No configured token: every request passes
    - Configured token: missing ?token= -> MissingTokenError (400),
      mismatch -> InvalidTokenError (401)
    - Comparison is constant-time

Design Decisions:
    - Token read from app.state.settings so each app instance carries its own
    - Query-string token: world scripts cannot set headers
"""

import secrets

from fastapi import Query, Request

from shaker.core.errors import InvalidTokenError, MissingTokenError


async def require_token(
    request: Request, token: str | None = Query(None),
) -> None:
    """FastAPI dependency enforcing the configured token, if any."""
    settings = request.app.state.settings
    if settings.token is None:
        return
    if token is None:
        raise MissingTokenError()
    expected = settings.token.get_secret_value()
    if not secrets.compare_digest(token.encode(), expected.encode()):
        raise InvalidTokenError()
