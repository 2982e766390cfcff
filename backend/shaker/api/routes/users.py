"""User Routes — aggregate views over users that have shaken hands.

Invariants:
    - Read-only; users are only created through handshakes
    - Names are newline-delimited plain text, one per user
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shaker.api.auth import require_token
from shaker.infrastructure.database import get_db
from shaker.services.ledger import Ledger

router = APIRouter(
    prefix="/users", tags=["users"],
    dependencies=[Depends(require_token)],
)


@router.get("/count", response_class=PlainTextResponse)
async def count_users(db: AsyncSession = Depends(get_db)):
    """Number of unique users that have shaken hands."""
    return str(await Ledger(db).count_users())


@router.get("/names", response_class=PlainTextResponse)
async def list_user_names(db: AsyncSession = Depends(get_db)):
    """Display names of all unique users that have shaken hands."""
    names = await Ledger(db).list_user_display_names()
    return "\n".join(names)
