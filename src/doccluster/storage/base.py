"""Abstract base class for document stores and factory function."""

from abc import ABC, abstractmethod
from typing import Any

from ..models import COMPLETED, ChunkEmbedding, Cluster, Document


class DocumentStoreBase(ABC):
    """Common interface for document/embedding storage backends.

    Reads only ever return documents whose status is ``completed``.
    """

    @abstractmethod
    def add_chunks(self, chunks: list[ChunkEmbedding]) -> None:
        """Add/upsert chunks together with their owning documents."""

    @abstractmethod
    def fetch_chunks_with_documents(self, tenant_id: str) -> list[ChunkEmbedding]:
        """All chunks of the tenant's completed documents, in storage order."""

    @abstractmethod
    def fetch_documents(self, tenant_id: str) -> list[Document]:
        """The tenant's completed documents."""

    @abstractmethod
    def save_clusters(self, tenant_id: str, clusters: list[Cluster]) -> None:
        """Replace every stored cluster of the tenant with ``clusters``."""

    @abstractmethod
    def load_clusters(self, tenant_id: str) -> list[dict[str, Any]]:
        """Stored clusters of the tenant as plain dicts."""


def document_from_record(data: dict[str, Any], tenant_id: str | None = None) -> Document:
    return Document(
        id=str(data["id"]),
        tenant_id=str(data.get("tenant_id") or tenant_id or ""),
        title=data.get("title") or "",
        type=data.get("type") or None,
        summary=data.get("summary"),
        status=data.get("status", COMPLETED),
        key_points=list(data.get("key_points") or []),
    )


def chunk_from_record(data: dict[str, Any]) -> ChunkEmbedding:
    """Build a chunk from a plain record such as one loaded from JSON/YAML.

    The owning document may be nested under ``document`` or flattened next
    to the chunk fields.
    """
    doc_data = dict(data.get("document") or {})
    doc_data.setdefault("id", data["document_id"])
    embedding = data.get("embedding")
    return ChunkEmbedding(
        chunk_id=str(data["chunk_id"]),
        document_id=str(data["document_id"]),
        embedding=[float(x) for x in embedding] if embedding is not None else None,
        document=document_from_record(doc_data, data.get("tenant_id")),
        content=data.get("content", ""),
    )


def get_document_store(config: dict[str, Any]) -> DocumentStoreBase:
    """Factory: return the right document store based on config."""
    backend = config.get("storage_backend", "chromadb")

    if backend == "json":
        from .memory import JsonDocumentStore
        return JsonDocumentStore(config["json_path"])
    elif backend == "chromadb":
        from .chromadb import ChromaDocumentStore
        return ChromaDocumentStore(config["chroma_path"])
    else:
        raise ValueError(f"Unknown storage_backend: {backend}")
