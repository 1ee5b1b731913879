"""Tests for vector math."""

import pytest

from doccluster.vectors import cosine_similarity


def test_self_similarity():
    for v in ([1.0, 2.0, 3.0], [0.1, -0.7, 0.3, 5.0], [3.0]):
        assert cosine_similarity(v, v) == 1.0


def test_zero_vector():
    assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0


def test_symmetry():
    a = [0.3, -1.2, 4.5, 0.0]
    b = [2.0, 0.5, -0.25, 1.0]
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_known_values():
    assert cosine_similarity([1, 0], [0, 1]) == 0.0
    assert cosine_similarity([1, 0], [-1, 0]) == -1.0
    assert cosine_similarity([1, 0], [0.8, 0.6]) == pytest.approx(0.8)


def test_malformed_vectors():
    assert cosine_similarity([], []) == 0.0
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0


def test_range():
    sim = cosine_similarity([1e-3, 5.0, -2.0], [7.0, -0.1, 3.3])
    assert -1.0 <= sim <= 1.0


def test_non_finite_entries_score_zero():
    nan, inf = float("nan"), float("inf")
    assert cosine_similarity([nan, 1.0], [1.0, 0.0]) == 0.0
    assert cosine_similarity([1.0, 0.0], [nan, 0.0]) == 0.0
    assert cosine_similarity([inf, 1.0], [1.0, 1.0]) == 0.0


def test_extreme_magnitudes():
    for v in ([1e80, 1e80], [1e300, -2e300], [1e-200, 3e-200], [5e-320, 1e-320]):
        assert cosine_similarity(v, v) == 1.0
    assert cosine_similarity([1e200, 0.0], [1.0, 0.0]) == 1.0
    assert cosine_similarity([1e-200, 0.0], [0.0, 1e200]) == 0.0
