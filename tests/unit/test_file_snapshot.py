"""Unit tests for FileSnapshot."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docstore.adapters.outbound import FileSnapshot
from docstore.domain.value_objects import ID_FIELD


class TestFileSnapshot:
    """Tests for FileSnapshot."""

    def test_write_then_read(self, temp_dir: Path) -> None:
        """A written snapshot reads back equal, in order."""
        snapshot = FileSnapshot(temp_dir / "test.db")
        data = {
            "dresses": [{ID_FIELD: "a", "size": 27}, {ID_FIELD: "b", "size": 32}],
            "shoes": [],
        }

        snapshot.write(data)

        assert snapshot.read() == data

    def test_write_replaces_content(self, temp_dir: Path) -> None:
        """Each write overwrites the previous snapshot."""
        snapshot = FileSnapshot(temp_dir / "test.db")
        snapshot.write({"old": [{ID_FIELD: "a"}]})
        snapshot.write({"new": []})

        assert snapshot.read() == {"new": []}

    def test_write_leaves_no_temp_file(self, temp_dir: Path) -> None:
        """Only the snapshot itself remains after a write."""
        FileSnapshot(temp_dir / "test.db").write({"dresses": []})
        assert [p.name for p in temp_dir.iterdir()] == ["test.db"]

    def test_unserializable_keeps_previous_snapshot(self, temp_dir: Path) -> None:
        """A failed encode leaves the existing file untouched."""
        path = temp_dir / "test.db"
        snapshot = FileSnapshot(path)
        snapshot.write({"dresses": [{ID_FIELD: "a"}]})

        with pytest.raises(TypeError):
            snapshot.write({"dresses": [{ID_FIELD: "a", "bad": object()}]})

        assert json.loads(path.read_text(encoding="utf-8")) == {"dresses": [{ID_FIELD: "a"}]}

    def test_read_missing_file(self, temp_dir: Path) -> None:
        """Reading a missing snapshot raises OSError."""
        with pytest.raises(OSError):
            FileSnapshot(temp_dir / "absent.db").read()

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"dresses": {"a": 1}}',
            '{"": []}',
            '{"dresses": [1]}',
            '{"dresses": [{"_id": "a"}, "noir"]}',
        ],
    )
    def test_read_invalid_content(self, temp_dir: Path, content: str) -> None:
        """Malformed snapshots raise ValueError."""
        path = temp_dir / "test.db"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ValueError):
            FileSnapshot(path).read()
