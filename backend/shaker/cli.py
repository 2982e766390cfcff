"""Shaker CLI — loads configuration, migrates the database, then serves or imports.

Usage:
    shaker --db shaker.db --api 127.0.0.1:9001 --token s3cret
    shaker --db shaker.db --import names.txt

Precedence: CLI flags > environment (SHAKER_*) > .env file > defaults.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

import uvicorn

from shaker.config import Settings
from shaker.infrastructure.database import DatabaseSessionManager
from shaker.infrastructure.migrations import run_migrations
from shaker.infrastructure.observability import setup_logging
from shaker.main import create_app
from shaker.services.legacy_import import ImportSummary, import_legacy_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shaker", description="Handshake ledger server",
    )
    parser.add_argument("-d", "--db", type=Path, help="Path to the SQLite database")
    parser.add_argument("-a", "--api", help="Address for the API to listen on (host:port)")
    parser.add_argument("-t", "--token", help="Token required to make requests")
    parser.add_argument(
        "--import", dest="legacy_import", type=Path,
        help="Plain-text file of line-separated usernames of past handshakes to import",
    )
    parser.add_argument("--log-level", help="Root log level (INFO, DEBUG, ...)")
    parser.add_argument("--log-format", choices=["json", "text"], help="Log output format")
    return parser


def load_settings(argv: list[str] | None = None) -> Settings:
    """Parse CLI flags and layer them over env/.env settings."""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


async def _run_import(settings: Settings) -> ImportSummary:
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        return await import_legacy_file(settings.legacy_import, manager)
    finally:
        await manager.dispose()


def main(argv: list[str] | None = None) -> None:
    """Console entry point."""
    settings = load_settings(argv)
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Starting Shaker server")

    run_migrations(settings.database_url)

    if settings.legacy_import is not None:
        asyncio.run(_run_import(settings))
        return

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
