"""
catlim/sets/index.py

Reverse maps (preimage indexes) for vector-backed functions.

For a function f: {0..n-1} -> Y given by the vector of its values, the
index answers preimage(f, y) = { i : f(i) == y } in time proportional to the
output size.

Two layouts:
  - skeletal codomain {0..m-1}: a boolean CSR matrix of shape (m, n); row y
    holds the sorted domain elements mapping to y
  - any other codomain: a dict y -> tuple of domain elements
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

_EMPTY = np.zeros(0, dtype=np.int64)


class PreimageIndex:
    """Preimage lookup table for a vector of function values."""

    def __init__(self, n_dom: int):
        self.n_dom = n_dom
        self._csr = None
        self._table = None

    @staticmethod
    def skeletal(values: np.ndarray, n_codom: int) -> "PreimageIndex":
        """Index for integer values in {0..n_codom-1}."""
        values = np.asarray(values, dtype=np.int64)
        n = values.shape[0]
        idx = PreimageIndex(n)
        M = sp.csr_matrix(
            (np.ones(n, dtype=np.int8), (values, np.arange(n, dtype=np.int64))),
            shape=(n_codom, n),
        )
        M.sort_indices()
        idx._csr = M
        return idx

    @staticmethod
    def generic(values: Sequence[Any], keys: Optional[Sequence[Any]] = None) -> "PreimageIndex":
        """
        Index for arbitrary hashable values.

        If keys is given, preimages are reported as keys[i] rather than i.
        """
        table: Dict[Any, List[Any]] = {}
        for i, y in enumerate(values):
            table.setdefault(y, []).append(i if keys is None else keys[i])
        idx = PreimageIndex(len(values))
        idx._table = {y: tuple(xs) for y, xs in table.items()}
        return idx

    @property
    def is_skeletal(self) -> bool:
        return self._csr is not None

    def lookup(self, y: Any) -> Tuple[int, ...] | np.ndarray:
        """Domain elements mapping to y, in increasing order."""
        if self._csr is not None:
            if isinstance(y, bool) or not isinstance(y, (int, np.integer)):
                return _EMPTY
            if not 0 <= y < self._csr.shape[0]:
                return _EMPTY
            M = self._csr
            return M.indices[M.indptr[y]:M.indptr[y + 1]].astype(np.int64, copy=False)
        return self._table.get(y, ())

    def __repr__(self) -> str:
        kind = "csr" if self._csr is not None else "dict"
        return f"PreimageIndex({kind}, n_dom={self.n_dom})"
