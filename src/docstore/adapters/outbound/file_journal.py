"""File-based journal implementation.

This adapter implements the JournalWriter protocol with a single
append-only text file beside the snapshot (``<filename>.swp``).

Journal File Format:
    One JSON-encoded JournalRecord per line, each terminated by ``\\n``.
    Blank lines are ignored on read.

Thread Safety:
    Single-writer assumed.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, TextIO

from docstore.domain.entities import JournalRecord
from docstore.ports.inbound.errors import CorruptJournalError
from docstore.ports.outbound.journal_writer import SyncMode


JOURNAL_FILE_MODE = 0o600
JOURNAL_ENCODING = "utf-8"


class FileJournal:
    """File-based implementation of the JournalWriter protocol.

    The file is opened in append mode at construction, so records left by
    an earlier process (not yet committed) are preserved.

    Attributes:
        path: The journal file.
        sync_mode: How each record is pushed to disk.
    """

    def __init__(self, path: str | Path, sync_mode: SyncMode = SyncMode.FLUSH) -> None:
        """Open the journal for appending.

        Args:
            path: Journal file path; created with mode 0600 if missing.
            sync_mode: Sync mode for durability.

        Raises:
            OSError: If the file cannot be opened.
        """
        self._path = Path(path)
        self._sync_mode = sync_mode
        self._records_written = 0

        fd = os.open(
            self._path,
            os.O_WRONLY | os.O_APPEND | os.O_CREAT,
            JOURNAL_FILE_MODE,
        )
        self._file: TextIO | None = os.fdopen(fd, "a", encoding=JOURNAL_ENCODING)

    @property
    def path(self) -> Path:
        """Return the journal file path."""
        return self._path

    @property
    def sync_mode(self) -> SyncMode:
        """Return the current sync mode."""
        return self._sync_mode

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def records_written(self) -> int:
        """Return how many records this writer appended."""
        return self._records_written

    def append(self, record: JournalRecord) -> None:
        """Append one record as a single line.

        Raises:
            OSError: If the journal is closed or the write fails.
            TypeError: If the payload is not JSON-serializable.
        """
        if self._file is None:
            raise OSError(f"Journal {self._path} is closed")

        # Encode first so an unserializable payload writes nothing
        line = record.to_line()
        self._file.write(line)
        self._records_written += 1

        if self._sync_mode == SyncMode.FSYNC:
            self._file.flush()
            os.fsync(self._file.fileno())
        elif self._sync_mode == SyncMode.FLUSH:
            self._file.flush()

    def close(self) -> None:
        """Flush and close the journal stream."""
        if self._file is None:
            return

        try:
            self._file.flush()
            if self._sync_mode != SyncMode.NONE:
                os.fsync(self._file.fileno())
        finally:
            self._file.close()
            self._file = None

    @staticmethod
    def read_records(path: str | Path) -> Iterator[JournalRecord]:
        """Read journal records back in the order they were written.

        Args:
            path: Journal file path.

        Yields:
            JournalRecord objects in append order.

        Raises:
            CorruptJournalError: If a line is not UTF-8 or cannot be decoded
                as a record.
            OSError: If the file cannot be read.
        """
        path = Path(path)
        with open(path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode(JOURNAL_ENCODING)
                    if not line.strip():
                        continue
                    record = JournalRecord.from_line(line)
                except ValueError as e:
                    raise CorruptJournalError(str(e), path, line_number) from e
                yield record

    def __enter__(self) -> FileJournal:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
