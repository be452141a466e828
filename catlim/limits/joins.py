"""
catlim/limits/joins.py

Limits of multicospans: multiway equi-joins.

Each algorithm takes the legs f_i: X_i -> Y of a Multicospan and produces
the positions (into each X_i) of every tuple (x_1, ..., x_k) with
f_1(x_1) == ... == f_k(x_k). The limit apex is {0..k-1} over those tuples.

Algorithms:
  - NESTED_LOOP: scan the Cartesian product
  - SORT_MERGE:  stable sort each leg, merge on the smallest group value
  - HASH:        probe one leg against preimage indexes of the others
  - SMART:       constant short-circuit for singleton legs, else HASH
"""

from __future__ import annotations

import itertools
import logging
import math
from enum import Enum
from typing import Any, Callable, List, Sequence

import numpy as np

from catlim.diagrams.shapes import Multicospan, Multispan
from catlim.limits.cone import ConeKind, Limit
from catlim.limits.products import leg_into, product_grid
from catlim.sets.finset import FinSetInt, is_skeletal
from catlim.sets.function import FinDomFunction
from catlim.sets.index import PreimageIndex

logger = logging.getLogger(__name__)


class JoinAlgorithm(Enum):
    SMART = "smart"
    NESTED_LOOP = "nested_loop"
    SORT_MERGE = "sort_merge"
    HASH = "hash"


def join(cospan: Multicospan, alg: JoinAlgorithm = JoinAlgorithm.SMART) -> Limit:
    """Limit of a multicospan with the selected join algorithm."""
    if not cospan.legs:
        raise ValueError("join needs a multicospan with at least one leg")
    logger.debug(
        "join %s over %d legs, domain sizes %s",
        alg.name, len(cospan.legs), [len(f.dom) for f in cospan.legs],
    )
    if alg is JoinAlgorithm.SMART:
        positions = _smart_join(cospan.legs)
    elif alg is JoinAlgorithm.NESTED_LOOP:
        positions = _nested_loop_join(cospan.legs)
    elif alg is JoinAlgorithm.SORT_MERGE:
        positions = _sort_merge_join(cospan.legs)
    elif alg is JoinAlgorithm.HASH:
        positions = _hash_join(cospan.legs)
    else:
        raise ValueError(f"Unknown join algorithm: {alg}")
    return joined_limit(cospan, positions)


def joined_limit(cospan: Multicospan, positions: Sequence[np.ndarray]) -> Limit:
    """Indexed limit whose i-th leg sends tuple j to positions[i][j] in X_i."""
    k = len(positions[0])
    legs = [leg_into(np.asarray(p, dtype=np.int64), f.dom) for p, f in zip(positions, cospan.legs)]
    return Limit(cospan, Multispan(legs, FinSetInt(k)), ConeKind.INDEXED)


def positional_preimage(f: FinDomFunction) -> Callable[[Any], Sequence[int]]:
    """
    Preimage lookup returning enumeration positions in dom(f).

    Skeletal domains reuse ensure_indexed, so the index is memoized on f.
    """
    if is_skeletal(f.dom):
        return f.ensure_indexed().preimage
    return PreimageIndex.generic(f.collect()).lookup


def _collect_positions(n_legs: int) -> List[List[int]]:
    return [[] for _ in range(n_legs)]


def _as_arrays(out: List[List[int]]) -> List[np.ndarray]:
    return [np.asarray(p, dtype=np.int64) for p in out]


# Nested loop
#------------

def _nested_loop_join(legs: Sequence[FinDomFunction]) -> List[np.ndarray]:
    cols = [f.collect() for f in legs]
    out = _collect_positions(len(legs))
    for I in itertools.product(*(range(len(c)) for c in cols)):
        y = cols[0][I[0]]
        if all(cols[j][I[j]] == y for j in range(1, len(cols))):
            for j, i in enumerate(I):
                out[j].append(i)
    return _as_arrays(out)


# Sort-merge
#-----------

def _stable_order(f: FinDomFunction, values: List[Any]) -> List[int]:
    if isinstance(getattr(f, "func", None), np.ndarray):
        return np.argsort(f.func, kind="stable").tolist()
    return sorted(range(len(values)), key=values.__getitem__)


def _sort_merge_join(legs: Sequence[FinDomFunction]) -> List[np.ndarray]:
    cols = [f.collect() for f in legs]
    orders = [_stable_order(f, c) for f, c in zip(legs, cols)]
    k = len(legs)
    starts = [0] * k
    stops = [0] * k
    values: List[Any] = [None] * k

    def next_group(i: int) -> None:
        n = len(orders[i])
        start = stops[i]
        if start >= n:
            starts[i] = stops[i] = n
            return
        y = cols[i][orders[i][start]]
        stop = start + 1
        while stop < n and cols[i][orders[i][stop]] == y:
            stop += 1
        starts[i], stops[i], values[i] = start, stop, y

    for i in range(k):
        next_group(i)

    out = _collect_positions(k)
    while all(starts[i] < stops[i] for i in range(k)):
        if all(values[i] == values[0] for i in range(1, k)):
            groups = [orders[i][starts[i]:stops[i]] for i in range(k)]
            for I in itertools.product(*groups):
                for j, x in enumerate(I):
                    out[j].append(x)
            for i in range(k):
                next_group(i)
        else:
            next_group(min(range(k), key=values.__getitem__))
    return _as_arrays(out)


# Hash
#-----

def _hash_join(legs: Sequence[FinDomFunction]) -> List[np.ndarray]:
    # Probe with the largest unindexed leg; indexed legs are cheapest as builds.
    sizes = [-1 if f.is_indexed() else len(f.dom) for f in legs]
    probe = max(range(len(legs)), key=sizes.__getitem__)
    builds = [i for i in range(len(legs)) if i != probe]
    lookups = [positional_preimage(legs[i]) for i in builds]
    logger.debug("hash join probes leg %d against %d indexed legs", probe, len(builds))

    out = _collect_positions(len(legs))
    for x, y in enumerate(legs[probe].collect()):
        pres = [lookup(y) for lookup in lookups]
        if any(len(p) == 0 for p in pres):
            continue
        for I in itertools.product(*pres):
            out[probe].append(x)
            for j, i in zip(builds, I):
                out[j].append(int(i))
    return _as_arrays(out)


# Smart
#------

def _smart_join(legs: Sequence[FinDomFunction]) -> List[np.ndarray]:
    singleton = next((i for i, f in enumerate(legs) if len(f.dom) == 1), None)
    if singleton is None:
        return _hash_join(legs)

    c = legs[singleton].collect()[0]
    others = [i for i in range(len(legs)) if i != singleton]
    logger.debug("smart join: leg %d is constant %r", singleton, c)
    pres = [np.asarray(positional_preimage(legs[i])(c), dtype=np.int64) for i in others]
    shape = [len(p) for p in pres]
    n = math.prod(shape)
    grid = product_grid(shape)

    out: List[np.ndarray] = [np.zeros(0, dtype=np.int64)] * len(legs)
    out[singleton] = np.zeros(n, dtype=np.int64)
    for j, i in enumerate(others):
        out[i] = pres[j][grid[j]]
    return out
