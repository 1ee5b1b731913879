"""Pairwise similarity between the documents of a working set."""

import logging
from itertools import combinations

import numpy as np

from ..models import DocumentVector, SimilarityPair
from ..vectors import cosine_similarity, rescale

logger = logging.getLogger(__name__)


def build_similarity_pairs(
    vectors: dict[str, DocumentVector],
    threshold: float,
) -> list[SimilarityPair]:
    """Compare every document against every other, keeping pairs >= threshold.

    Each unordered pair is emitted at most once and never for a document
    against itself.
    """
    ids = list(vectors)
    if len(ids) < 2:
        return []

    dims = {len(vectors[i].embedding) for i in ids}
    if len(dims) != 1:
        logger.warning(f"Mixed embedding dimensions {sorted(dims)}; comparing pairwise")
        return _pairwise(ids, vectors, threshold)

    matrix = _similarity_matrix(np.array([vectors[i].embedding for i in ids], dtype=float))
    rows, cols = np.triu_indices(len(ids), k=1)
    scores = matrix[rows, cols]
    keep = scores >= threshold

    pairs = [
        SimilarityPair(doc_a=ids[i], doc_b=ids[j], score=float(s))
        for i, j, s in zip(rows[keep], cols[keep], scores[keep])
    ]
    logger.debug(f"{len(pairs)} pair(s) >= {threshold} among {len(ids)} document(s)")
    return pairs


def _similarity_matrix(embeddings: np.ndarray) -> np.ndarray:
    """Cosine similarity of all rows.

    Zero-magnitude rows and rows with non-finite entries score 0.0 against everything.
    """
    finite = np.all(np.isfinite(embeddings), axis=1)
    embeddings = rescale(np.where(finite[:, None], embeddings, 0.0))
    norms = np.linalg.norm(embeddings, axis=1)
    safe = np.where(norms == 0, 1.0, norms)
    unit = embeddings / safe[:, None]
    return np.clip(unit @ unit.T, -1.0, 1.0)


def _pairwise(ids: list[str], vectors: dict[str, DocumentVector], threshold: float) -> list[SimilarityPair]:
    pairs = []
    for id_a, id_b in combinations(ids, 2):
        sim = cosine_similarity(vectors[id_a].embedding, vectors[id_b].embedding)
        if sim >= threshold:
            pairs.append(SimilarityPair(doc_a=id_a, doc_b=id_b, score=sim))
    return pairs
