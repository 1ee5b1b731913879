"""In-memory document store and its JSON-file-backed variant."""

import json
import logging
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

from ..models import ChunkEmbedding, Cluster, Document
from .base import DocumentStoreBase, chunk_from_record, document_from_record

logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStoreBase):
    """Keeps documents, chunks and clusters in plain dicts.

    Document and chunk ids are only unique within a tenant, so both maps
    are keyed by ``(tenant_id, id)``.
    """

    def __init__(self):
        self.documents: dict[tuple[str, str], Document] = {}
        self.chunks: dict[tuple[str, str], ChunkEmbedding] = {}
        self.clusters: dict[str, list[dict[str, Any]]] = {}

    def add_documents(self, documents: list[Document]) -> None:
        """Add/upsert documents that may have no chunks yet."""
        for doc in documents:
            self.documents[(doc.tenant_id, doc.id)] = doc

    def add_chunks(self, chunks: list[ChunkEmbedding]) -> None:
        for chunk in chunks:
            tenant_id = chunk.document.tenant_id
            self.documents[(tenant_id, chunk.document_id)] = chunk.document
            self.chunks[(tenant_id, chunk.chunk_id)] = chunk

    def fetch_chunks_with_documents(self, tenant_id: str) -> list[ChunkEmbedding]:
        result = []
        for (chunk_tenant, _), chunk in self.chunks.items():
            if chunk_tenant != tenant_id:
                continue
            doc = self.documents.get((tenant_id, chunk.document_id), chunk.document)
            if not doc.is_completed:
                continue
            result.append(replace(chunk, document=doc))
        return result

    def fetch_documents(self, tenant_id: str) -> list[Document]:
        return [d for d in self.documents.values() if d.tenant_id == tenant_id and d.is_completed]

    def save_clusters(self, tenant_id: str, clusters: list[Cluster]) -> None:
        self.clusters[tenant_id] = [c.to_dict(include_centroid=True) for c in clusters]

    def load_clusters(self, tenant_id: str) -> list[dict[str, Any]]:
        return list(self.clusters.get(tenant_id, []))


class JsonDocumentStore(MemoryDocumentStore):
    """Memory store persisted to a single JSON corpus file after every write.

    File layout::

        {"documents": [...], "chunks": [...], "clusters": {"<tenant>": [...]}}
    """

    def __init__(self, json_path: str):
        super().__init__()
        self.json_path = Path(json_path)
        if self.json_path.exists():
            self._load()

    def _load(self) -> None:
        data = json.loads(self.json_path.read_text(encoding="utf-8") or "{}")
        for record in data.get("documents", []):
            doc = document_from_record(record)
            self.documents[(doc.tenant_id, doc.id)] = doc
        for record in data.get("chunks", []):
            record = dict(record)
            doc = self.documents.get((record.get("tenant_id", ""), record["document_id"]))
            if doc is not None:
                record.setdefault("document", asdict(doc))
            chunk = chunk_from_record(record)
            tenant_id = chunk.document.tenant_id
            self.documents.setdefault((tenant_id, chunk.document_id), chunk.document)
            self.chunks[(tenant_id, chunk.chunk_id)] = chunk
        self.clusters = {k: list(v) for k, v in data.get("clusters", {}).items()}
        logger.debug(f"Loaded {len(self.documents)} document(s), {len(self.chunks)} chunk(s) from {self.json_path}")

    def _flush(self) -> None:
        data = {
            "documents": [asdict(d) for d in self.documents.values()],
            "chunks": [
                {
                    "chunk_id": c.chunk_id,
                    "document_id": c.document_id,
                    "tenant_id": c.document.tenant_id,
                    "embedding": c.embedding,
                    "content": c.content,
                }
                for c in self.chunks.values()
            ],
            "clusters": self.clusters,
        }
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.json_path.with_suffix(self.json_path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.json_path)

    def add_documents(self, documents: list[Document]) -> None:
        super().add_documents(documents)
        self._flush()

    def add_chunks(self, chunks: list[ChunkEmbedding]) -> None:
        super().add_chunks(chunks)
        self._flush()

    def save_clusters(self, tenant_id: str, clusters: list[Cluster]) -> None:
        super().save_clusters(tenant_id, clusters)
        self._flush()
