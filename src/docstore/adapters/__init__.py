"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Alternative calling conventions (asyncio)
- Outbound adapters: Journal and snapshot files
"""

from docstore.adapters.outbound import (
    FileJournal,
    FileSnapshot,
)

__all__ = [
    # Outbound adapters
    "FileJournal",
    "FileSnapshot",
]
