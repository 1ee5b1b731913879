"""Cluster a tenant's documents by embedding similarity."""

import logging
import time

import numpy as np

from ..labeling import LabelGenerator, label_cluster
from ..models import Cluster, ClusteringResult, ClusteringStats, DocumentVector
from ..storage import DocumentStoreBase
from .aggregate import aggregate_chunks
from .pairs import build_similarity_pairs
from .union_find import build_clusters

logger = logging.getLogger(__name__)

CLUSTER_COLORS = (
    "#3B82F6",  # blue
    "#8B5CF6",  # purple
    "#10B981",  # green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#14B8A6",  # teal
    "#EC4899",  # pink
    "#6366F1",  # indigo
)

CLUSTER_ICONS = (
    "folder", "book", "file-text", "briefcase",
    "lightbulb", "star", "tag", "bookmark",
)


def cluster_documents(
    tenant_id: str,
    store: DocumentStoreBase,
    label_generator: LabelGenerator | None = None,
    min_size: int = 2,
    max_clusters: int = 10,
    threshold: float = 0.7,
    strategy: str = "first",
    max_documents: int | None = None,
    max_summary_chars: int = 200,
    persist: bool = False,
) -> ClusteringResult:
    """Group the tenant's completed, embedded documents into labeled clusters.

    Args:
        tenant_id: Tenant whose corpus is clustered.
        store: Document store to read chunks from (and persist to).
        label_generator: Names clusters; None uses fallback labels.
        min_size: Smallest cluster kept.
        max_clusters: Largest number of clusters returned.
        threshold: Minimum cosine similarity linking two documents.
        strategy: Per-document vector, ``"first"`` chunk or ``"centroid"``.
        max_documents: Optional cap on documents compared; the rest are unclustered.
        max_summary_chars: Summary length sent to the label generator.
        persist: Replace the tenant's stored clusters with the result.

    Returns:
        ClusteringResult. Too little data is not an error: it yields no
        clusters with every document reported unclustered.
    """
    chunks = store.fetch_chunks_with_documents(tenant_id)
    vectors = aggregate_chunks(chunks, strategy=strategy)
    doc_ids = list(vectors)
    logger.debug(f"Tenant {tenant_id}: {len(chunks)} chunk(s), {len(doc_ids)} embedded document(s)")

    candidates = doc_ids
    if max_documents is not None and len(doc_ids) > max_documents:
        logger.warning(f"Tenant {tenant_id}: clustering first {max_documents} of {len(doc_ids)} documents")
        candidates = doc_ids[:max_documents]

    groups: list[list[str]] = []
    if len(candidates) >= min_size:
        working = {doc_id: vectors[doc_id] for doc_id in candidates}
        pairs = build_similarity_pairs(working, threshold)
        groups = build_clusters(candidates, pairs, min_size, max_clusters)

    stamp = int(time.time() * 1000)
    clusters = []
    for i, members in enumerate(groups):
        member_vectors = [vectors[doc_id] for doc_id in members]
        label = label_cluster(member_vectors, i, label_generator, max_summary_chars)
        clusters.append(Cluster(
            id=f"cluster-{stamp}-{i}",
            name=label.name,
            description=label.description,
            keywords=label.keywords,
            document_ids=members,
            confidence=label.confidence,
            color=CLUSTER_COLORS[i % len(CLUSTER_COLORS)],
            icon=CLUSTER_ICONS[i % len(CLUSTER_ICONS)],
            centroid=_centroid(member_vectors),
        ))

    clustered = {doc_id for c in clusters for doc_id in c.document_ids}
    result = ClusteringResult(
        clusters=clusters,
        unclustered=[doc_id for doc_id in doc_ids if doc_id not in clustered],
        stats=ClusteringStats(
            total=len(doc_ids),
            clustered_count=len(clustered),
            cluster_count=len(clusters),
        ),
    )

    if persist:
        store.save_clusters(tenant_id, clusters)
    return result


def _centroid(members: list[DocumentVector]) -> list[float] | None:
    dims = {len(m.embedding) for m in members}
    if len(dims) != 1:
        return None
    return np.mean([m.embedding for m in members], axis=0).tolist()
