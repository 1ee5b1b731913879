"""Storage abstraction for document/embedding backends."""

from .base import DocumentStoreBase, chunk_from_record, get_document_store
from .memory import JsonDocumentStore, MemoryDocumentStore

__all__ = ["DocumentStoreBase", "MemoryDocumentStore", "JsonDocumentStore", "chunk_from_record", "get_document_store"]
