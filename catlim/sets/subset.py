"""
catlim/sets/subset.py

Subsets of finite sets.

A subset A ⊆ X is stored as its characteristic predicate, a boolean vector
over the enumeration of X (Bool is the subobject classifier of Set). The
inclusion map and the lattice operations are derived from the predicate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from catlim.sets.finset import AttrVar, FinSet, FinSetInt, as_finset
from catlim.sets.function import FinDomFunction, VectorFunction


@dataclass(frozen=True, eq=False)
class SubFinSet:
    """
    Subset of a finite set given by a boolean predicate.

    Attributes:
        ob: The ambient set X.
        predicate: Boolean vector of length |X|.
    """
    ob: FinSet
    predicate: np.ndarray

    def __post_init__(self):
        pred = np.asarray(self.predicate, dtype=bool)
        if pred.ndim != 1 or pred.shape[0] != len(self.ob):
            raise ValueError(
                f"Size of predicate {pred.shape} does not equal size of object {self.ob}"
            )
        object.__setattr__(self, "predicate", pred)

    @staticmethod
    def from_hom(f: FinDomFunction) -> "SubFinSet":
        """Image of a function into a finite set, e.g. an inclusion."""
        X = f.codom
        pred = np.zeros(len(X), dtype=bool)
        for y in f.collect():
            pred[X.position(y)] = True
        return SubFinSet(X, pred)

    @staticmethod
    def from_var_hom(f: Any) -> "SubFinSet":
        """Variables hit by a VarFunction; concrete values are ignored."""
        pred = np.zeros(f.codom_size, dtype=bool)
        for y in f.collect():
            if isinstance(y, AttrVar):
                pred[y.val] = True
        return SubFinSet(FinSetInt(f.codom_size), pred)

    @staticmethod
    def top(X: Any) -> "SubFinSet":
        X = as_finset(X)
        return SubFinSet(X, np.ones(len(X), dtype=bool))

    @staticmethod
    def bottom(X: Any) -> "SubFinSet":
        X = as_finset(X)
        return SubFinSet(X, np.zeros(len(X), dtype=bool))

    def hom(self) -> VectorFunction:
        """Inclusion of the subset, {0..k-1} -> X."""
        positions = np.flatnonzero(self.predicate)
        if isinstance(self.ob, FinSetInt):
            return VectorFunction(positions, self.ob, known_correct=True)
        elems = self.ob.elements()
        return VectorFunction([elems[i] for i in positions.tolist()], self.ob, known_correct=True)

    def _check_same(self, other: "SubFinSet") -> None:
        if self.ob != other.ob:
            raise ValueError(f"Subsets of different sets: {self.ob} and {other.ob}")

    def meet(self, other: "SubFinSet") -> "SubFinSet":
        self._check_same(other)
        return SubFinSet(self.ob, self.predicate & other.predicate)

    def join(self, other: "SubFinSet") -> "SubFinSet":
        self._check_same(other)
        return SubFinSet(self.ob, self.predicate | other.predicate)

    def negate(self) -> "SubFinSet":
        return SubFinSet(self.ob, ~self.predicate)

    def __len__(self) -> int:
        return int(np.count_nonzero(self.predicate))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SubFinSet):
            return NotImplemented
        return self.ob == other.ob and bool(np.array_equal(self.predicate, other.predicate))

    def __hash__(self) -> int:
        return hash((self.ob, self.predicate.tobytes()))

    def __repr__(self) -> str:
        return f"SubFinSet({self.ob}, {np.flatnonzero(self.predicate).tolist()})"
