"""Data models used throughout doccluster."""

from dataclasses import asdict, dataclass, field
from typing import Any


COMPLETED = "completed"


@dataclass
class Document:
    """A tenant-scoped document, as supplied by the document store."""
    id: str
    tenant_id: str
    title: str
    type: str | None = None
    summary: str | None = None
    status: str = COMPLETED
    key_points: list[str] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED


@dataclass
class ChunkEmbedding:
    """An embedded chunk of a document."""
    chunk_id: str
    document_id: str
    embedding: list[float] | None
    document: Document
    content: str = ""  # provenance only


@dataclass
class DocumentVector:
    """The single representative vector of one document in a working set."""
    document_id: str
    embedding: list[float]
    title: str
    type: str | None = None
    summary: str | None = None


@dataclass
class SimilarityPair:
    """An unordered pair of documents whose similarity passed the threshold."""
    doc_a: str
    doc_b: str
    score: float


@dataclass
class ClusterLabel:
    name: str
    description: str
    keywords: list[str] = field(default_factory=list)
    confidence: float = 0.5
    fallback: bool = False


@dataclass
class Cluster:
    """A labeled group of documents produced by one clustering run."""
    id: str
    name: str
    description: str
    keywords: list[str]
    document_ids: list[str]
    confidence: float
    color: str
    icon: str
    centroid: list[float] | None = None

    def to_dict(self, include_centroid: bool = False) -> dict[str, Any]:
        data = asdict(self)
        if not include_centroid:
            data.pop("centroid")
        return data


@dataclass
class ClusteringStats:
    total: int = 0
    clustered_count: int = 0
    cluster_count: int = 0


@dataclass
class ClusteringResult:
    """Result of clustering a tenant's corpus."""
    clusters: list[Cluster] = field(default_factory=list)
    unclustered: list[str] = field(default_factory=list)
    stats: ClusteringStats = field(default_factory=ClusteringStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "clusters": [c.to_dict() for c in self.clusters],
            "unclustered": list(self.unclustered),
            "stats": asdict(self.stats),
        }


@dataclass
class SimilarDocument:
    document_id: str
    title: str
    similarity: float


@dataclass
class Topic:
    """A declared-type bucket with its most common key-point fragments."""
    topic: str
    document_count: int
    keywords: list[str] = field(default_factory=list)
