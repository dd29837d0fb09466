"""Pytest configuration and fixtures for docstore tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from docstore.domain.services import Collection
from docstore.infrastructure.config import CollectionConfig, JournalConfig, StoreConfig
from docstore.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store_config(temp_dir: Path) -> StoreConfig:
    """Provide a persisted store configuration inside the temp directory."""
    return StoreConfig(
        name="test-store",
        filename=temp_dir / "test.db",
        journal=JournalConfig(sync_mode="flush"),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def dresses() -> Collection:
    """Provide an empty collection named 'dresses'."""
    return Collection(CollectionConfig(name="dresses"))


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
