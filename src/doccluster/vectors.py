"""Vector math shared by clustering and similarity queries."""

import math
from collections.abc import Sequence

import numpy as np


def rescale(v: np.ndarray) -> np.ndarray:
    """Divide by the largest magnitude entry; direction is unchanged.

    Keeps squared norms in range for very large or very small vectors.
    """
    peak = np.max(np.abs(v), axis=-1, keepdims=True)
    return v / np.where(peak == 0, 1.0, peak)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 when the lengths differ, either vector is empty, has a
    non-finite entry, or has zero magnitude.
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        return 0.0
    if not (np.all(np.isfinite(va)) and np.all(np.isfinite(vb))):
        return 0.0

    va, vb = rescale(va), rescale(vb)
    # sqrt of the product keeps cosine_similarity(v, v) exactly 1.0
    magnitude = math.sqrt(float(np.dot(va, va)) * float(np.dot(vb, vb)))
    if magnitude == 0.0:
        return 0.0

    sim = float(np.dot(va, vb)) / magnitude
    if not math.isfinite(sim):
        return 0.0
    return max(-1.0, min(1.0, sim))
