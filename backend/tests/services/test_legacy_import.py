"""Legacy Import — verifies name-only backfill and fail-open line handling."""

import asyncio

import pytest

from shaker.core.errors import StoreError
from shaker.services.ledger import Ledger
from shaker.services.legacy_import import import_legacy_file, import_legacy_names


async def test_imports_one_handshake_per_line(db_manager):
    summary = await import_legacy_names(["Alice", "Bob", "Alice"], db_manager)

    assert (summary.imported, summary.failed, summary.skipped) == (3, 0, 0)
    async with db_manager.session() as db:
        ledger = Ledger(db)
        assert await ledger.count_users() == 2
        assert await ledger.count_handshakes() == 3


async def test_blank_lines_are_skipped(db_manager):
    summary = await import_legacy_names(["Alice", "", "   ", "Bob\n"], db_manager)

    assert summary.imported == 2
    assert summary.skipped == 2
    async with db_manager.session() as db:
        assert await Ledger(db).list_user_display_names() == ["Alice", "Bob"]


async def test_failed_name_does_not_abort_import(db_manager, monkeypatch, caplog):
    real_record_legacy = Ledger.record_legacy

    async def flaky_record_legacy(self, display_name):
        if display_name == "Broken":
            raise StoreError("Connection or operational error", "execute")
        return await real_record_legacy(self, display_name)

    monkeypatch.setattr(Ledger, "record_legacy", flaky_record_legacy)

    summary = await import_legacy_names(["Alice", "Broken", "Bob"], db_manager)

    assert summary.imported == 2
    assert summary.failed == 1
    assert "Unable to import legacy user Broken" in caplog.text
    async with db_manager.session() as db:
        assert await Ledger(db).list_user_display_names() == ["Alice", "Bob"]


async def test_import_file_reads_names(db_manager, tmp_path):
    path = tmp_path / "names.txt"
    path.write_text("Alice\r\nBob\r\n", encoding="utf-8")

    summary = await import_legacy_file(path, db_manager)

    assert summary.imported == 2
    async with db_manager.session() as db:
        assert await Ledger(db).list_user_display_names() == ["Alice", "Bob"]


async def test_missing_file_fails_before_import(db_manager, tmp_path):
    with pytest.raises(FileNotFoundError):
        await import_legacy_file(tmp_path / "missing.txt", db_manager)


async def test_import_file_reads_off_the_event_loop(db_manager, tmp_path, monkeypatch):
    path = tmp_path / "names.txt"
    path.write_text("Alice\n", encoding="utf-8")
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        offloaded.append(func)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

    summary = await import_legacy_file(path, db_manager)

    assert summary.imported == 1
    assert offloaded == [path.read_text]
