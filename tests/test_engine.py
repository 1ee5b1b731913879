"""Tests for the end-to-end clustering run."""

import numpy as np

from doccluster.clustering.engine import CLUSTER_COLORS, CLUSTER_ICONS, cluster_documents
from doccluster.labeling import LabelGenerator
from doccluster.models import ChunkEmbedding, Document
from doccluster.storage import MemoryDocumentStore


class FailingGenerator(LabelGenerator):
    def __init__(self):
        self.calls = 0

    def generate_label(self, documents):
        self.calls += 1
        raise RuntimeError("service unavailable")


class EchoGenerator(LabelGenerator):
    def generate_label(self, documents):
        return {
            "name": documents[0]["title"],
            "description": f"{len(documents)} documents",
            "keywords": ["alpha", "beta"],
            "confidence": 0.9,
        }


def _make_store(vectors: dict[str, list[float]], tenant="t1") -> MemoryDocumentStore:
    store = MemoryDocumentStore()
    chunks = []
    for doc_id, embedding in vectors.items():
        doc = Document(id=doc_id, tenant_id=tenant, title=f"Title {doc_id}", type="Report", summary="x" * 500)
        chunks.append(ChunkEmbedding(chunk_id=f"{doc_id}-0", document_id=doc_id, embedding=embedding, document=doc))
    store.add_chunks(chunks)
    return store


def _scenario_a_store():
    return _make_store({
        "a": [1.0, 0.1, 0.0, 0.0],
        "b": [1.0, 0.05, 0.0, 0.0],
        "c": [1.0, 0.0, 0.0, 0.05],
        "d": [0.1, 0.0, 1.0, 0.0],
        "e": [0.0, 1.0, 0.0, 0.0],
    })


def _random_store(n=30, dim=8, seed=0):
    rng = np.random.default_rng(seed)
    centers = rng.normal(size=(4, dim))
    vectors = {}
    for i in range(n):
        vectors[f"doc{i:02d}"] = (centers[i % 4] + rng.normal(scale=0.6, size=dim)).tolist()
    return _make_store(vectors)


def test_scenario_one_cluster_two_unclustered():
    result = cluster_documents("t1", _scenario_a_store(), min_size=2, threshold=0.7)
    assert len(result.clusters) == 1
    assert sorted(result.clusters[0].document_ids) == ["a", "b", "c"]
    assert sorted(result.unclustered) == ["d", "e"]
    assert result.stats.total == 5
    assert result.stats.clustered_count == 3
    assert result.stats.cluster_count == 1


def test_single_document_corpus():
    result = cluster_documents("t1", _make_store({"only": [1.0, 0.0]}))
    assert result.to_dict() == {
        "clusters": [],
        "unclustered": ["only"],
        "stats": {"total": 1, "clustered_count": 0, "cluster_count": 0},
    }


def test_empty_corpus():
    result = cluster_documents("t1", MemoryDocumentStore())
    assert result.clusters == []
    assert result.unclustered == []
    assert result.stats.total == 0


def test_other_tenants_ignored():
    store = _scenario_a_store()
    other = Document(id="x", tenant_id="t2", title="Other")
    store.add_chunks([ChunkEmbedding(chunk_id="x-0", document_id="x", embedding=[1.0, 0.1, 0.0, 0.0], document=other)])
    result = cluster_documents("t1", store)
    assert "x" not in result.unclustered
    assert all("x" not in c.document_ids for c in result.clusters)


def test_fallback_labels_when_generator_fails():
    store = _make_store({
        "a": [1.0, 0.0, 0.0], "b": [0.99, 0.01, 0.0], "c": [0.98, 0.02, 0.0],
        "d": [0.0, 1.0, 0.0], "e": [0.0, 0.99, 0.01],
    })
    generator = FailingGenerator()
    result = cluster_documents("t1", store, label_generator=generator)
    assert generator.calls == 2
    assert [c.name for c in result.clusters] == ["Collection 1", "Collection 2"]
    assert all(c.confidence == 0.5 for c in result.clusters)
    assert all(c.keywords == [] for c in result.clusters)


def test_labels_palette_and_ids():
    result = cluster_documents("t1", _scenario_a_store(), label_generator=EchoGenerator())
    c = result.clusters[0]
    assert c.name == "Title a"
    assert c.description == "3 documents"
    assert c.keywords == ["alpha", "beta"]
    assert c.confidence == 0.9
    assert c.color == CLUSTER_COLORS[0]
    assert c.icon == CLUSTER_ICONS[0]
    assert c.id.startswith("cluster-") and c.id.endswith("-0")
    assert len(c.centroid) == 4


def test_determinism():
    first = cluster_documents("t1", _random_store(), threshold=0.6)
    second = cluster_documents("t1", _random_store(), threshold=0.6)
    assert [set(c.document_ids) for c in first.clusters] == [set(c.document_ids) for c in second.clusters]
    assert first.unclustered == second.unclustered


def test_disjoint_and_size_floor_and_cap():
    for min_size in (2, 3, 5):
        for max_clusters in (1, 3, 10):
            result = cluster_documents("t1", _random_store(), min_size=min_size,
                                       max_clusters=max_clusters, threshold=0.5)
            members = [d for c in result.clusters for d in c.document_ids]
            assert len(members) == len(set(members))
            assert all(len(c.document_ids) >= min_size for c in result.clusters)
            assert len(result.clusters) <= max_clusters
            assert set(members) | set(result.unclustered) == {f"doc{i:02d}" for i in range(30)}


def test_threshold_monotonicity():
    store = _random_store()
    counts = [
        cluster_documents("t1", store, threshold=t).stats.clustered_count
        for t in (0.0, 0.3, 0.5, 0.7, 0.8, 0.9, 0.99)
    ]
    assert counts == sorted(counts, reverse=True)


def test_max_documents_cap():
    result = cluster_documents("t1", _scenario_a_store(), max_documents=2)
    assert result.stats.total == 5
    assert sorted(result.clusters[0].document_ids) == ["a", "b"]
    assert sorted(result.unclustered) == ["c", "d", "e"]


def test_persist_replaces_clusters():
    store = _scenario_a_store()
    cluster_documents("t1", store, persist=True)
    cluster_documents("t1", store, persist=True)
    saved = store.load_clusters("t1")
    assert len(saved) == 1
    assert sorted(saved[0]["document_ids"]) == ["a", "b", "c"]


def test_tenants_sharing_document_ids():
    store = MemoryDocumentStore()
    chunks = []
    for tenant, vectors in (("t1", {"a": [1.0, 0.0], "b": [0.95, 0.05]}), ("t2", {"a": [0.0, 1.0]})):
        for doc_id, embedding in vectors.items():
            doc = Document(id=doc_id, tenant_id=tenant, title=f"{tenant} {doc_id}")
            chunks.append(ChunkEmbedding(chunk_id=f"{doc_id}-0", document_id=doc_id, embedding=embedding, document=doc))
    store.add_chunks(chunks)

    first = cluster_documents("t1", store)
    assert first.stats.total == 2
    assert sorted(first.clusters[0].document_ids) == ["a", "b"]

    second = cluster_documents("t2", store)
    assert second.stats.total == 1
    assert second.unclustered == ["a"]
