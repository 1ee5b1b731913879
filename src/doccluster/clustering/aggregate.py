"""Collapse chunk-level embeddings into one vector per document."""

import numpy as np

from ..models import ChunkEmbedding, DocumentVector

STRATEGIES = ("first", "centroid")


def aggregate_chunks(
    chunks: list[ChunkEmbedding],
    strategy: str = "first",
) -> dict[str, DocumentVector]:
    """Build the document working set from a tenant's embedded chunks.

    With ``"first"`` the first chunk carrying an embedding represents the
    document. With ``"centroid"`` all embedded chunks of the document are
    averaged. Documents without any embedded chunk are left out.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown aggregation strategy: {strategy}")

    grouped: dict[str, list[ChunkEmbedding]] = {}
    for chunk in chunks:
        if chunk.embedding is None or len(chunk.embedding) == 0:
            continue
        members = grouped.setdefault(chunk.document_id, [])
        if strategy == "first" and members:
            continue
        members.append(chunk)

    vectors = {}
    for doc_id, members in grouped.items():
        first = members[0]
        if strategy == "centroid" and len(members) > 1:
            dim = len(first.embedding)
            same_dim = [np.asarray(c.embedding, dtype=float) for c in members if len(c.embedding) == dim]
            embedding = np.mean(same_dim, axis=0).tolist()
        else:
            embedding = [float(x) for x in first.embedding]

        doc = first.document
        vectors[doc_id] = DocumentVector(
            document_id=doc_id,
            embedding=embedding,
            title=doc.title,
            type=doc.type,
            summary=doc.summary,
        )
    return vectors
