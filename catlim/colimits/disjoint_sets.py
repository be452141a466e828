"""
catlim/colimits/disjoint_sets.py

Union-find over the integers {0..n-1}, stored as numpy arrays.
"""

from __future__ import annotations

import numpy as np


class IntDisjointSets:
    """Disjoint sets with union by rank and path compression."""

    def __init__(self, n: int):
        self.parent = np.arange(n, dtype=np.int64)
        self.rank = np.zeros(n, dtype=np.int32)
        self.ngroups = n

    def __len__(self) -> int:
        return self.parent.shape[0]

    def find_root(self, x: int) -> int:
        parent = self.parent
        root = x
        while parent[root] != root:
            root = parent[root]
        while parent[x] != root:
            nxt = parent[x]
            parent[x] = root
            x = nxt
        return int(root)

    def union(self, x: int, y: int) -> int:
        """Merge the sets of x and y; returns the new root."""
        rx, ry = self.find_root(x), self.find_root(y)
        if rx == ry:
            return rx
        if self.rank[rx] < self.rank[ry]:
            rx, ry = ry, rx
        self.parent[ry] = rx
        if self.rank[rx] == self.rank[ry]:
            self.rank[rx] += 1
        self.ngroups -= 1
        return rx

    def in_same_set(self, x: int, y: int) -> bool:
        return self.find_root(x) == self.find_root(y)

    def num_groups(self) -> int:
        return self.ngroups

    def roots(self) -> np.ndarray:
        """Root of every element."""
        return np.fromiter((self.find_root(i) for i in range(len(self))), dtype=np.int64, count=len(self))

    def __repr__(self) -> str:
        return f"IntDisjointSets(n={len(self)}, groups={self.ngroups})"
