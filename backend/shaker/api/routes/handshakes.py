"""Handshake Routes — record handshakes and count them.

Invariants:
    - POST /handshakes always creates a handshake (and a user on first contact)
    - GET /handshakes/count/user is lookup-only: unknown identity -> 404
    - Counts are returned as plain-text integers

Design Decisions:
    - Form-encoded input with fields id/name/world, as posted by world scripts
"""

from fastapi import APIRouter, Depends, Form, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shaker.api.auth import require_token
from shaker.infrastructure.database import get_db
from shaker.schemas.handshake import HandshakeResponse
from shaker.services.ledger import Ledger

router = APIRouter(
    prefix="/handshakes", tags=["handshakes"],
    dependencies=[Depends(require_token)],
)


@router.post(
    "", response_model=HandshakeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_handshake(
    external_id: str = Form("", alias="id", max_length=255),
    display_name: str = Form(..., alias="name", min_length=1, max_length=255),
    world_name: str = Form("", alias="world", max_length=255),
    db: AsyncSession = Depends(get_db),
):
    """Store a new handshake, creating/updating its user if necessary."""
    handshake = await Ledger(db).record_handshake(
        external_id, display_name, world_name,
    )
    return HandshakeResponse.model_validate(handshake)


@router.get("/count", response_class=PlainTextResponse)
async def count_handshakes(db: AsyncSession = Depends(get_db)):
    """Total number of handshakes that have occurred."""
    return str(await Ledger(db).count_handshakes())


@router.get("/count/user", response_class=PlainTextResponse)
async def count_handshakes_for_user(
    external_id: str = Query("", alias="id", max_length=255),
    display_name: str = Query("", alias="name", max_length=255),
    db: AsyncSession = Depends(get_db),
):
    """Number of handshakes a specific user has performed."""
    return str(await Ledger(db).count_handshakes_for_identity(
        external_id, display_name,
    ))
