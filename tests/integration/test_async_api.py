"""Integration tests for the asyncio adapter."""

from __future__ import annotations

import asyncio

import pytest

from docstore.adapters.inbound import AsyncCollection, AsyncStore
from docstore.application import DocumentStore
from docstore.domain.services import Collection
from docstore.domain.value_objects import ID_FIELD
from docstore.infrastructure.config import CollectionConfig, StoreConfig
from docstore.infrastructure.metrics import MetricsRegistry
from docstore.ports.inbound.errors import NotUniqueError, TypeMismatchError


@pytest.mark.integration
class TestAsyncCollection:
    """Tests for AsyncCollection."""

    def test_operations_delegate(self) -> None:
        """Every coroutine returns what the core collection returns."""

        async def scenario() -> None:
            dresses = AsyncCollection(Collection(CollectionConfig(name="dresses")))

            noir = await dresses.insert({"dress": "noir", "size": 27})
            amour = await dresses.insert({"dress": "amour", "size": 27})

            assert await dresses.find_by_id(noir[ID_FIELD]) is noir
            assert await dresses.find({"size": 27}) == [noir, amour]
            assert await dresses.find_one({"dress": "amour"}) is amour

            await dresses.update_by_id(amour[ID_FIELD], {"size": 28})
            assert amour["size"] == 28

            assert await dresses.delete_by_id(noir[ID_FIELD]) is noir
            assert await dresses.find_all() == [amour]
            assert dresses.collection.find_all() == [amour]

        asyncio.run(scenario())

    def test_errors_propagate(self) -> None:
        """Core exceptions surface unchanged."""

        async def scenario() -> None:
            dresses = AsyncCollection(Collection(CollectionConfig(name="dresses")))
            await dresses.delete_by_id("missing")

        with pytest.raises(NotUniqueError):
            asyncio.run(scenario())


@pytest.mark.integration
class TestAsyncStore:
    """Tests for AsyncStore."""

    def test_rejects_core_collections(self, metrics_registry: MetricsRegistry) -> None:
        """Only async collection views are accepted."""

        async def scenario() -> None:
            store = AsyncStore(DocumentStore(StoreConfig(), metrics=metrics_registry))
            await store.add_collection(Collection(CollectionConfig(name="dresses")))  # type: ignore[arg-type]

        with pytest.raises(TypeMismatchError):
            asyncio.run(scenario())

    def test_get_collection_returns_view(self, metrics_registry: MetricsRegistry) -> None:
        """Registered views come back; unknown names return None."""

        async def scenario() -> None:
            store = AsyncStore(DocumentStore(StoreConfig(), metrics=metrics_registry))
            dresses = AsyncCollection(Collection(CollectionConfig(name="dresses")))

            assert await store.add_collection(dresses) is store
            assert await store.get_collection("dresses") is dresses
            assert await store.get_collection("shoes") is None

        asyncio.run(scenario())

    def test_commit_save_load(
        self, store_config: StoreConfig, metrics_registry: MetricsRegistry
    ) -> None:
        """Persistence operations run off the loop and keep their semantics."""

        async def scenario() -> None:
            store = AsyncStore(DocumentStore(store_config, metrics=metrics_registry))
            dresses = AsyncCollection(Collection(CollectionConfig(name="dresses")))
            await store.add_collection(dresses)

            noir = await dresses.insert({"dress": "noir"})
            await store.commit()
            assert store.last_replay_stats.records_read == 1
            await store.save()
            await store.close()

            reloaded = AsyncStore(DocumentStore(store_config, metrics=metrics_registry))
            await reloaded.load()
            view = await reloaded.get_collection("dresses")
            assert await view.find_all() == [noir]
            await reloaded.close()

        asyncio.run(scenario())

    def test_wraps_any_store_port(self) -> None:
        """The adapter relies only on the store port's operations."""

        class RecordingStore:
            name = "recording"
            last_replay_stats = None

            def __init__(self) -> None:
                self.calls: list[str] = []
                self.collections: dict[str, Collection] = {}

            def add_collection(self, collection: Collection) -> RecordingStore:
                self.collections[collection.name] = collection
                return self

            def get_collection(self, name: str) -> Collection | None:
                return self.collections.get(name)

            def commit(self) -> RecordingStore:
                self.calls.append("commit")
                return self

            def save(self) -> RecordingStore:
                self.calls.append("save")
                return self

            def load(self) -> RecordingStore:
                self.calls.append("load")
                return self

            def close(self) -> None:
                self.calls.append("close")

        async def scenario(core: RecordingStore) -> None:
            store = AsyncStore(core)
            await store.add_collection(AsyncCollection(Collection(CollectionConfig(name="dresses"))))
            view = await store.get_collection("dresses")
            assert view.name == "dresses"
            await store.commit()
            await store.save()
            await store.load()
            await store.close()
            assert store.name == "recording"

        core = RecordingStore()
        asyncio.run(scenario(core))

        assert core.calls == ["commit", "save", "load", "close"]
