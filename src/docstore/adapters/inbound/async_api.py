"""Asyncio adapter for collections and stores.

This module re-exposes every synchronous collection and store operation
as a coroutine. Semantics, return values and exceptions are exactly those
of the wrapped core objects; nothing is re-implemented here.

In-memory operations run inline on the event loop. Operations that touch
the filesystem (``commit``, ``save``, ``load``) run in a worker thread via
``asyncio.to_thread``; await each of them before issuing further
mutations on the same store.

Usage:
    from docstore.adapters.inbound.async_api import AsyncCollection, AsyncStore

    store = AsyncStore(DocumentStore(StoreConfig(filename=path)))
    dresses = AsyncCollection(Collection(CollectionConfig(name="dresses")))
    await store.add_collection(dresses)

    await dresses.insert({"dress": "noir", "size": 27})
    await store.commit()
    await store.save()
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from docstore.domain.services.collection import Collection, Document, Listener
from docstore.ports.inbound.document_store import DocumentStorePort, ReplayStats
from docstore.ports.inbound.errors import TypeMismatchError


class AsyncCollection:
    """Coroutine-returning view of a Collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    @property
    def collection(self) -> Collection:
        """Return the wrapped core collection."""
        return self._collection

    @property
    def name(self) -> str:
        return self._collection.name

    def on(self, event: str, listener: Listener) -> None:
        self._collection.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self._collection.off(event, listener)

    async def insert(self, document: Document) -> Document:
        return self._collection.insert(document)

    async def find_by_id(self, document_id: str) -> Document | None:
        return self._collection.find_by_id(document_id)

    async def find(self, query: Mapping[str, Any]) -> list[Document]:
        return self._collection.find(query)

    async def find_one(self, query: Mapping[str, Any]) -> Document | None:
        return self._collection.find_one(query)

    async def find_all(self) -> list[Document]:
        return self._collection.find_all()

    async def update(self, query: Mapping[str, Any], patch: Mapping[str, Any]) -> list[Document]:
        return self._collection.update(query, patch)

    async def update_by_id(self, document_id: str, patch: Mapping[str, Any]) -> Document:
        return self._collection.update_by_id(document_id, patch)

    async def delete(self, query: Mapping[str, Any]) -> list[Document]:
        return self._collection.delete(query)

    async def delete_by_id(self, document_id: str) -> Document:
        return self._collection.delete_by_id(document_id)

    async def insert_or_update(
        self, query: Mapping[str, Any], document: Document
    ) -> list[Document]:
        return self._collection.insert_or_update(query, document)


class AsyncStore:
    """Coroutine-returning view of a DocumentStorePort (normally a DocumentStore).

    Accepts only ``AsyncCollection`` instances; the wrapped collection is
    registered with the core store, which applies its own type check.
    """

    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store
        self._views: dict[str, AsyncCollection] = {}

    @property
    def store(self) -> DocumentStorePort:
        """Return the wrapped core store."""
        return self._store

    @property
    def name(self) -> str:
        return self._store.name

    @property
    def last_replay_stats(self) -> ReplayStats | None:
        return self._store.last_replay_stats

    async def add_collection(self, collection: AsyncCollection) -> AsyncStore:
        """Register an async collection with the wrapped store.

        Raises:
            TypeMismatchError: If collection is not an AsyncCollection, or
                the wrapped collection fails the store's own check.
        """
        if not isinstance(collection, AsyncCollection):
            raise TypeMismatchError(
                f"AsyncStore accepts only AsyncCollection instances, got {type(collection).__name__}"
            )
        self._store.add_collection(collection.collection)
        self._views[collection.name] = collection
        return self

    async def get_collection(self, name: str) -> AsyncCollection | None:
        """Return an async view of the named collection, or None."""
        core = self._store.get_collection(name)
        if core is None:
            return None
        view = self._views.get(name)
        if view is None or view.collection is not core:
            view = AsyncCollection(core)
            self._views[name] = view
        return view

    async def commit(self) -> AsyncStore:
        await asyncio.to_thread(self._store.commit)
        return self

    async def save(self) -> AsyncStore:
        await asyncio.to_thread(self._store.save)
        return self

    async def load(self) -> AsyncStore:
        await asyncio.to_thread(self._store.load)
        return self

    async def close(self) -> None:
        await asyncio.to_thread(self._store.close)
