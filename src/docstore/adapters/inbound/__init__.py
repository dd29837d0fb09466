"""Inbound adapters for the document store.

Inbound adapters expose the core to other calling conventions.

Exports:
    Asyncio:
        - AsyncCollection: Coroutine view of a Collection
        - AsyncStore: Coroutine view of a DocumentStore
"""

from docstore.adapters.inbound.async_api import AsyncCollection, AsyncStore

__all__ = [
    "AsyncCollection",
    "AsyncStore",
]
