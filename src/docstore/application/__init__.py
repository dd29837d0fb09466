"""Application layer - the document store entry point."""

from docstore.application.document_store import DocumentStore

__all__ = ["DocumentStore"]
