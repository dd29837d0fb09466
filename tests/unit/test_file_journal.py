"""Unit tests for FileJournal."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Generator

import pytest

from docstore.adapters.outbound import FileJournal
from docstore.domain.entities import JournalRecord, OperationKind
from docstore.domain.value_objects import ID_FIELD
from docstore.ports.inbound.errors import CorruptJournalError
from docstore.ports.outbound.journal_writer import SyncMode


def _record(n: int, operation: OperationKind = OperationKind.INSERT) -> JournalRecord:
    return JournalRecord("dresses", operation, {ID_FIELD: f"id-{n}", "n": n})


class TestFileJournal:
    """Tests for FileJournal."""

    @pytest.fixture
    def journal_path(self, temp_dir: Path) -> Path:
        return temp_dir / "test.db.swp"

    @pytest.fixture
    def journal(self, journal_path: Path) -> Generator[FileJournal, None, None]:
        """Create a journal for testing."""
        j = FileJournal(journal_path, sync_mode=SyncMode.NONE)
        yield j
        j.close()

    def test_creation(self, journal_path: Path) -> None:
        """Opening a journal creates an owner-only file."""
        j = FileJournal(journal_path)

        assert journal_path.exists()
        assert j.path == journal_path
        assert j.sync_mode == SyncMode.FLUSH
        assert not j.closed
        if os.name == "posix":
            assert stat.S_IMODE(journal_path.stat().st_mode) & 0o077 == 0

        j.close()

    def test_append_writes_one_line_per_record(
        self, journal: FileJournal, journal_path: Path
    ) -> None:
        """Each record becomes exactly one newline-terminated line."""
        for i in range(3):
            journal.append(_record(i))
        journal.close()

        lines = journal_path.read_text(encoding="utf-8").splitlines(keepends=True)
        assert len(lines) == 3
        assert all(line.endswith("\n") for line in lines)
        assert journal.records_written == 3

    def test_read_records_in_order(self, journal: FileJournal, journal_path: Path) -> None:
        """Records come back in append order."""
        written = [_record(i) for i in range(5)]
        for record in written:
            journal.append(record)
        journal.close()

        assert list(FileJournal.read_records(journal_path)) == written

    def test_reopen_appends(self, journal_path: Path) -> None:
        """Reopening keeps earlier records."""
        with FileJournal(journal_path) as first:
            first.append(_record(1))
        with FileJournal(journal_path) as second:
            second.append(_record(2))

        records = list(FileJournal.read_records(journal_path))
        assert [r.document["n"] for r in records] == [1, 2]

    @pytest.mark.parametrize("mode", [SyncMode.FSYNC, SyncMode.FLUSH])
    def test_synced_modes_are_readable_before_close(
        self, journal_path: Path, mode: SyncMode
    ) -> None:
        """With fsync/flush, records are on disk right after append."""
        j = FileJournal(journal_path, sync_mode=mode)
        j.append(_record(1))

        assert len(list(FileJournal.read_records(journal_path))) == 1
        j.close()

    def test_append_after_close_fails(self, journal: FileJournal) -> None:
        """A closed journal refuses appends."""
        journal.close()
        assert journal.closed
        with pytest.raises(OSError):
            journal.append(_record(1))

    def test_close_is_idempotent(self, journal: FileJournal) -> None:
        """Closing twice is harmless."""
        journal.close()
        journal.close()

    def test_unserializable_payload_writes_nothing(
        self, journal: FileJournal, journal_path: Path
    ) -> None:
        """A payload JSON cannot encode raises and leaves the file untouched."""
        with pytest.raises(TypeError):
            journal.append(JournalRecord("dresses", OperationKind.INSERT, {"bad": object()}))
        journal.close()

        assert journal_path.read_text(encoding="utf-8") == ""

    def test_blank_lines_are_skipped(self, journal_path: Path) -> None:
        """Empty lines in the journal are ignored."""
        journal_path.write_text("\n" + _record(1).to_line() + "\n\n", encoding="utf-8")
        assert len(list(FileJournal.read_records(journal_path))) == 1

    def test_corrupt_line_reports_line_number(self, journal_path: Path) -> None:
        """An undecodable line raises CorruptJournalError with its line number."""
        journal_path.write_text(
            _record(1).to_line()
            + '{"collection": "dresses", "operation": "upsert", "document": {}}\n',
            encoding="utf-8",
        )

        with pytest.raises(CorruptJournalError) as exc_info:
            list(FileJournal.read_records(journal_path))

        assert exc_info.value.line_number == 2
        assert exc_info.value.path == journal_path

    def test_invalid_utf8_line_is_corrupt(self, journal_path: Path) -> None:
        """A line that is not UTF-8 is reported like any undecodable line."""
        journal_path.write_bytes(
            _record(1).to_line().encode("utf-8")
            + b'{"collection":"dresses","operation":"insert","document":{"_id":"x","a":"\xff"}}\n'
        )

        with pytest.raises(CorruptJournalError) as exc_info:
            list(FileJournal.read_records(journal_path))

        assert exc_info.value.line_number == 2
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_open_failure_raises(self, temp_dir: Path) -> None:
        """Opening inside a missing directory raises OSError."""
        with pytest.raises(OSError):
            FileJournal(temp_dir / "missing" / "test.db.swp")
