"""JSON snapshot file.

The snapshot is a single JSON object whose keys are collection names and
whose values are arrays of documents in collection order. Writes go to a
temporary sibling first and are moved into place, so a failed save never
leaves a truncated snapshot behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from docstore.ports.outbound.snapshot_storage import SnapshotData


SNAPSHOT_ENCODING = "utf-8"


class FileSnapshot:
    """File-based implementation of the SnapshotStorage protocol."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _temp_path(self) -> Path:
        return self._path.with_name(f".{self._path.name}.tmp")

    def write(self, data: SnapshotData) -> None:
        """Replace the snapshot file with data.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If a document holds a value JSON cannot encode.
        """
        # Encode before touching the filesystem
        content = json.dumps(data, separators=(",", ":"))

        temp_path = self._temp_path()
        try:
            with open(temp_path, "w", encoding=SNAPSHOT_ENCODING) as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self._path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def read(self) -> SnapshotData:
        """Read and decode the snapshot.

        Raises:
            OSError: If the file is missing or unreadable.
            ValueError: If the content is not JSON, not an object, or a
                collection entry is unnamed, not an array, or holds a
                non-object document.
        """
        with open(self._path, "r", encoding=SNAPSHOT_ENCODING) as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(
                f"Snapshot must be a JSON object, got {type(data).__name__}"
            )
        for name, documents in data.items():
            if not name:
                raise ValueError("Snapshot contains a collection with an empty name")
            if not isinstance(documents, list):
                raise ValueError(f"Snapshot entry {name!r} is not an array")
            for position, document in enumerate(documents):
                if not isinstance(document, dict):
                    raise ValueError(
                        f"Snapshot entry {name!r} holds a non-object at position {position}"
                    )
        return data
