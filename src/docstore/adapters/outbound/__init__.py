"""Outbound adapters - implementations of outbound ports.

These adapters implement the store's persistence: the append-only
journal and the whole-store snapshot file.
"""

from docstore.adapters.outbound.file_journal import FileJournal
from docstore.adapters.outbound.file_snapshot import FileSnapshot

__all__ = [
    "FileJournal",
    "FileSnapshot",
]
