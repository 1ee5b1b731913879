"""Label generator interface and the fallback-safe labeling step."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..models import ClusterLabel, DocumentVector

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "A group of related documents"
FALLBACK_CONFIDENCE = 0.5


class LabelGenerator(ABC):
    """Turns a list of document summaries into a cluster label."""

    @abstractmethod
    def generate_label(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a dict with name, description, keywords and confidence.

        Each input dict has ``title``, ``type`` and ``summary`` keys.
        May raise; callers fall back to a default label.
        """


def fallback_label(ordinal: int) -> ClusterLabel:
    return ClusterLabel(
        name=f"Collection {ordinal + 1}",
        description=FALLBACK_DESCRIPTION,
        keywords=[],
        confidence=FALLBACK_CONFIDENCE,
        fallback=True,
    )


def summarize_documents(docs: list[DocumentVector], max_summary_chars: int = 200) -> list[dict[str, Any]]:
    """Prompt-sized view of a cluster's members."""
    return [
        {
            "title": d.title,
            "type": d.type or "Unknown",
            "summary": (d.summary or "")[:max_summary_chars] or "No summary",
        }
        for d in docs
    ]


def label_cluster(
    docs: list[DocumentVector],
    ordinal: int,
    generator: LabelGenerator | None = None,
    max_summary_chars: int = 200,
) -> ClusterLabel:
    """Label one cluster, never raising.

    Any failure of the generator yields the ``Collection N`` fallback.
    Fields missing from an otherwise valid reply are filled from it.
    """
    default = fallback_label(ordinal)
    if generator is None:
        return default

    try:
        reply = generator.generate_label(summarize_documents(docs, max_summary_chars))
    except Exception as e:
        logger.warning(f"Label generation failed for cluster {ordinal + 1}: {e}")
        return default

    if not isinstance(reply, dict):
        logger.warning(f"Unusable label reply for cluster {ordinal + 1}: {reply!r:.100}")
        return default

    name = reply.get("name")
    description = reply.get("description")
    return ClusterLabel(
        name=name.strip() if isinstance(name, str) and name.strip() else default.name,
        description=description.strip() if isinstance(description, str) and description.strip() else default.description,
        keywords=_coerce_keywords(reply.get("keywords")),
        confidence=_coerce_confidence(reply.get("confidence")),
    )


def _coerce_keywords(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(k).strip() for k in value if isinstance(k, (str, int, float)) and str(k).strip()]


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return FALLBACK_CONFIDENCE
    try:
        conf = float(value)
    except ValueError:
        return FALLBACK_CONFIDENCE
    if conf != conf:  # NaN
        return FALLBACK_CONFIDENCE
    return max(0.0, min(1.0, conf))
