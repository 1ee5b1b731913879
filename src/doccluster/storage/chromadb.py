"""ChromaDB document store backend."""

import json
import logging
from pathlib import Path
from typing import Any

import chromadb

from ..models import COMPLETED, ChunkEmbedding, Cluster, Document
from .base import DocumentStoreBase

logger = logging.getLogger(__name__)

CHUNKS = "chunks"
CLUSTERS = "clusters"


def _clean(meta: dict[str, Any]) -> dict[str, Any]:
    """Chroma metadata values must be scalars; drop Nones."""
    return {k: v for k, v in meta.items() if v is not None}


class ChromaDocumentStore(DocumentStoreBase):
    """ChromaDB-backed persistent store.

    Chunks live in one collection with their document fields as metadata;
    persisted clusters live in a second one keyed by their centroid.
    """

    def __init__(self, chroma_path: str | None = None, client=None):
        if client is None:
            path = Path(chroma_path)
            path.mkdir(parents=True, exist_ok=True)
            client = chromadb.PersistentClient(path=str(path))
        self.client = client

    def get_or_create_collection(self, name: str = CHUNKS) -> chromadb.Collection:
        return self.client.get_or_create_collection(
            name=name,
            metadata={"hnsw:space": "cosine"},
        )

    def add_chunks(self, chunks: list[ChunkEmbedding]) -> None:
        missing = [c.chunk_id for c in chunks if not c.embedding]
        if missing:
            raise ValueError(f"{len(missing)} chunk(s) have no embedding, e.g. {missing[0]}")
        if not chunks:
            return

        collection = self.get_or_create_collection(CHUNKS)
        collection.upsert(
            ids=[f"{c.document.tenant_id}:{c.chunk_id}" for c in chunks],
            embeddings=[list(c.embedding) for c in chunks],
            documents=[c.content for c in chunks],
            metadatas=[
                _clean({
                    "chunk_id": c.chunk_id,
                    "document_id": c.document_id,
                    "tenant_id": c.document.tenant_id,
                    "title": c.document.title,
                    "type": c.document.type,
                    "summary": c.document.summary,
                    "status": c.document.status,
                    "key_points": json.dumps(c.document.key_points),
                })
                for c in chunks
            ],
        )

    def fetch_chunks_with_documents(self, tenant_id: str) -> list[ChunkEmbedding]:
        collection = self.get_or_create_collection(CHUNKS)
        data = collection.get(
            where={"$and": [{"tenant_id": {"$eq": tenant_id}}, {"status": {"$eq": COMPLETED}}]},
            include=["documents", "metadatas", "embeddings"],
        )
        ids = data["ids"] or []
        embeddings = data["embeddings"] if data["embeddings"] is not None else [None] * len(ids)
        metadatas = data["metadatas"] or [{}] * len(ids)
        contents = data["documents"] or [""] * len(ids)

        chunks = []
        for stored_id, emb, meta, content in zip(ids, embeddings, metadatas, contents):
            chunks.append(ChunkEmbedding(
                chunk_id=meta.get("chunk_id", stored_id),
                document_id=meta["document_id"],
                embedding=[float(x) for x in emb] if emb is not None else None,
                document=_document_from_meta(meta),
                content=content or "",
            ))
        return chunks

    def fetch_documents(self, tenant_id: str) -> list[Document]:
        docs: dict[str, Document] = {}
        for chunk in self.fetch_chunks_with_documents(tenant_id):
            docs.setdefault(chunk.document_id, chunk.document)
        return list(docs.values())

    def save_clusters(self, tenant_id: str, clusters: list[Cluster]) -> None:
        collection = self.get_or_create_collection(CLUSTERS)
        collection.delete(where={"tenant_id": {"$eq": tenant_id}})

        storable = [c for c in clusters if c.centroid]
        if len(storable) < len(clusters):
            logger.warning(f"Skipping {len(clusters) - len(storable)} cluster(s) without a centroid")
        if not storable:
            return

        collection.add(
            ids=[f"{tenant_id}:{c.id}" for c in storable],
            embeddings=[c.centroid for c in storable],
            documents=[c.description for c in storable],
            metadatas=[
                {
                    "tenant_id": tenant_id,
                    "cluster_id": c.id,
                    "name": c.name,
                    "keywords": json.dumps(c.keywords),
                    "document_ids": json.dumps(c.document_ids),
                    "confidence": float(c.confidence),
                    "color": c.color,
                    "icon": c.icon,
                }
                for c in storable
            ],
        )

    def load_clusters(self, tenant_id: str) -> list[dict[str, Any]]:
        collection = self.get_or_create_collection(CLUSTERS)
        data = collection.get(where={"tenant_id": {"$eq": tenant_id}}, include=["documents", "metadatas"])
        clusters = []
        for meta, description in zip(data["metadatas"] or [], data["documents"] or []):
            clusters.append({
                "id": meta["cluster_id"],
                "name": meta["name"],
                "description": description,
                "keywords": json.loads(meta.get("keywords", "[]")),
                "document_ids": json.loads(meta.get("document_ids", "[]")),
                "confidence": meta.get("confidence", 0.5),
                "color": meta.get("color"),
                "icon": meta.get("icon"),
            })
        return clusters


def _document_from_meta(meta: dict[str, Any]) -> Document:
    return Document(
        id=meta["document_id"],
        tenant_id=meta.get("tenant_id", ""),
        title=meta.get("title", ""),
        type=meta.get("type"),
        summary=meta.get("summary"),
        status=meta.get("status", COMPLETED),
        key_points=json.loads(meta.get("key_points", "[]")),
    )
