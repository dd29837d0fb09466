"""Unit tests for document identifiers."""

from __future__ import annotations

import re

import pytest

from docstore.domain.value_objects import generate_document_id, is_document_id


@pytest.mark.unit
class TestDocumentId:
    """Tests for identifier generation."""

    def test_generated_ids_are_url_safe_text(self) -> None:
        """Ids are non-empty URL-safe strings."""
        document_id = generate_document_id()
        assert isinstance(document_id, str)
        assert re.fullmatch(r"[A-Za-z0-9_-]+", document_id)

    def test_generated_ids_differ(self) -> None:
        """Consecutive ids are distinct."""
        assert len({generate_document_id() for _ in range(1000)}) == 1000

    def test_is_document_id(self) -> None:
        """Only non-empty text counts as an id."""
        assert is_document_id("abc")
        assert not is_document_id("")
        assert not is_document_id(42)
        assert not is_document_id(None)
