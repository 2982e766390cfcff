"""Legacy Import — one-time backfill of historical handshakes known only by name.

Invariants:
    - One display name per non-blank line; blank lines skipped
    - Each name runs in its own DB session
    - A failing name is logged and counted; the remaining names still run
    - An unreadable input file fails before any name is processed

Design Decisions:
    - Fail-open per line: partial success is acceptable for an offline batch,
      the summary and error logs tell the operator what to review
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from shaker.core.errors import ShakerError
from shaker.infrastructure.database import DatabaseSessionManager
from shaker.services.ledger import Ledger

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Per-run counters for a legacy import."""
    imported: int = 0
    failed: int = 0
    skipped: int = 0


async def import_legacy_names(
    lines: Iterable[str], db_manager: DatabaseSessionManager,
) -> ImportSummary:
    """Record one legacy handshake per name in `lines`."""
    summary = ImportSummary()
    for raw in lines:
        name = raw.rstrip("\r\n")
        if not name.strip():
            summary.skipped += 1
            continue
        try:
            async with db_manager.session() as db:
                handshake = await Ledger(db).record_legacy(name)
        except ShakerError as e:
            summary.failed += 1
            logger.error(
                f"Unable to import legacy user {name}: {e.message}",
                extra={"display_name": name, "error_code": e.code},
            )
            continue
        summary.imported += 1
        logger.debug(
            f"Imported legacy handshake for {name}",
            extra={"user_id": handshake.user_id, "handshake_id": handshake.id},
        )

    logger.info(
        f"Legacy import finished: {summary.imported} imported, "
        f"{summary.failed} failed, {summary.skipped} skipped",
    )
    return summary


async def import_legacy_file(
    path: Path, db_manager: DatabaseSessionManager,
) -> ImportSummary:
    """Read a newline-separated name file and import it."""
    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    logger.info(f"Importing legacy handshakes from {path}")
    return await import_legacy_names(content.splitlines(), db_manager)
