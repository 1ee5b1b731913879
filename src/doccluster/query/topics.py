"""Coarse topic detection from declared document types and key points."""

from ..models import Topic
from ..storage import DocumentStoreBase

GENERAL = "General"
MAX_KEYWORDS = 5
WORDS_PER_POINT = 3
MIN_WORD_LENGTH = 5


def extract_keywords(key_points: list[str]) -> list[str]:
    """First few long words of each key point, deduplicated in order."""
    keywords: dict[str, None] = {}
    for point in key_points:
        words = [w for w in point.lower().split() if len(w) >= MIN_WORD_LENGTH]
        for word in words[:WORDS_PER_POINT]:
            keywords.setdefault(word)
    return list(keywords)


def detect_topics(tenant_id: str, store: DocumentStoreBase, max_topics: int = 10) -> list[Topic]:
    """Bucket the tenant's completed documents by declared type.

    Buckets are ordered by document count, largest first.
    """
    groups: dict[str, list[str]] = {}
    counts: dict[str, int] = {}
    for doc in store.fetch_documents(tenant_id):
        topic = doc.type or GENERAL
        counts[topic] = counts.get(topic, 0) + 1
        groups.setdefault(topic, []).extend(doc.key_points or [])

    topics = [
        Topic(topic=name, document_count=counts[name], keywords=extract_keywords(points)[:MAX_KEYWORDS])
        for name, points in groups.items()
    ]
    topics.sort(key=lambda t: t.document_count, reverse=True)
    return topics[:max(max_topics, 0)]
