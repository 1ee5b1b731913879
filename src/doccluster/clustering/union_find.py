"""Connected components of the similarity graph via union-find."""

from ..models import SimilarityPair


class UnionFind:
    """Disjoint sets over ``0..n-1`` with path compression and union by rank."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            nxt = self.parent[x]
            self.parent[x] = root
            x = nxt
        return root

    def union(self, x: int, y: int) -> bool:
        """Merge the sets of x and y. Returns False if they were already joined."""
        rx, ry = self.find(x), self.find(y)
        if rx == ry:
            return False
        if self.rank[rx] < self.rank[ry]:
            rx, ry = ry, rx
        self.parent[ry] = rx
        if self.rank[rx] == self.rank[ry]:
            self.rank[rx] += 1
        return True


def build_clusters(
    doc_ids: list[str],
    pairs: list[SimilarityPair],
    min_size: int,
    max_clusters: int,
) -> list[list[str]]:
    """Group documents linked by similarity pairs.

    Groups smaller than ``min_size`` are dropped, the rest are ordered by
    size (largest first) and at most ``max_clusters`` are returned.
    """
    if len(doc_ids) < min_size or max_clusters <= 0:
        return []

    index = {doc_id: i for i, doc_id in enumerate(doc_ids)}
    uf = UnionFind(len(doc_ids))

    for pair in sorted(pairs, key=lambda p: p.score, reverse=True):
        a, b = index.get(pair.doc_a), index.get(pair.doc_b)
        if a is None or b is None:
            continue
        uf.union(a, b)

    groups: dict[int, list[str]] = {}
    for i, doc_id in enumerate(doc_ids):
        groups.setdefault(uf.find(i), []).append(doc_id)

    clusters = [g for g in groups.values() if len(g) >= min_size]
    clusters.sort(key=len, reverse=True)
    return clusters[:max_clusters]
