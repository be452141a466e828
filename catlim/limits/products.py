"""
catlim/limits/products.py

Products, equalizers and coproducts of finite sets, plus their universal
properties.

Elements of a product are enumerated in C order (last factor varies
fastest), so the pairing of a cone is np.ravel_multi_index of the cone's
leg positions. Non-skeletal sets are handled through their enumeration
positions.
"""

from __future__ import annotations

import math
from typing import Any, List, Sequence, Tuple

import numpy as np

from catlim.diagrams.shapes import DiscreteDiagram, Multicospan, Multispan, ParallelMorphisms
from catlim.errors import DomainError
from catlim.limits.cone import CoconeKind, ConeKind, Colimit, Limit
from catlim.sets.finset import FinSetInt, TypeSet, is_skeletal
from catlim.sets.function import ConstantFunction, DictFunction, FinDomFunction, VectorFunction


# Position helpers
#-----------------

def positions_in(values: Sequence[Any], X: Any) -> np.ndarray:
    """Positions of values in the enumeration of X, as an int64 vector."""
    if is_skeletal(X):
        out = np.asarray(values, dtype=np.int64).reshape(-1)
        bad = np.flatnonzero((out < 0) | (out >= len(X)))
        if bad.size:
            raise DomainError(int(out[bad[0]]), X)
        return out
    lookup = {x: i for i, x in enumerate(X)}
    try:
        return np.fromiter((lookup[y] for y in values), dtype=np.int64, count=len(values))
    except KeyError as err:
        raise DomainError(err.args[0], X) from None


def leg_into(positions: np.ndarray, X: Any) -> VectorFunction:
    """The function i -> (element of X at positions[i])."""
    if is_skeletal(X):
        return VectorFunction(positions, X, known_correct=True)
    elems = X.elements()
    return VectorFunction([elems[i] for i in positions.tolist()], X, known_correct=True)


def function_from(dom: Any, values: Sequence[Any], codom: Any) -> FinDomFunction:
    """Function out of dom with the given values, in dom's enumeration order."""
    if is_skeletal(dom):
        return VectorFunction(values, codom, known_correct=True)
    return DictFunction(dict(zip(dom, values)), codom)


def product_grid(shape: Sequence[int]) -> Tuple[np.ndarray, ...]:
    """Position vectors of every tuple of a product of the given sizes, in C order."""
    if not shape:
        return ()
    n = math.prod(shape)
    if n == 0:
        return tuple(np.zeros(0, dtype=np.int64) for _ in shape)
    return np.unravel_index(np.arange(n, dtype=np.int64), shape)


def _cone_apex(cone: Any) -> Any:
    apex = getattr(cone, "apex", None)
    if apex is None:
        raise ValueError("Cone with no legs needs an explicit apex")
    return apex


# Terminal and products
#----------------------

def terminal(diagram: Any = None) -> Limit:
    """The one-element set {0}, limit of the empty diagram."""
    apex = FinSetInt(1)
    return Limit(diagram, Multispan((), apex), ConeKind.TERMINAL)


def universal_terminal(cone: Multispan) -> FinDomFunction:
    return ConstantFunction(0, _cone_apex(cone), FinSetInt(1))


def product(sets: Sequence[Any], diagram: Any = None) -> Limit:
    """
    Cartesian product of finite sets with its projections.

    Element i of the product is the tuple of positions
    np.unravel_index(i, [len(X) for X in sets]).
    """
    sets = list(sets)
    if not sets:
        return terminal(diagram if diagram is not None else DiscreteDiagram(()))
    shape = [len(X) for X in sets]
    n = math.prod(shape)
    grid = product_grid(shape)
    legs = [leg_into(np.asarray(grid[j], dtype=np.int64), X) for j, X in enumerate(sets)]
    d = diagram if diagram is not None else DiscreteDiagram(tuple(sets))
    return Limit(d, Multispan(legs, FinSetInt(n)), ConeKind.PRODUCT)


def universal_product(lim: Limit, cone: Multispan) -> FinDomFunction:
    """The pairing <f_1, ..., f_k>: A -> X_1 x ... x X_k."""
    feet = [f.codom for f in lim.legs]
    if len(cone.legs) != len(feet):
        raise ValueError(f"Cone has {len(cone.legs)} legs, product has {len(feet)} factors")
    if not feet:
        return universal_terminal(cone)
    apex = _cone_apex(cone)
    cols = [positions_in(f.collect(), X) for f, X in zip(cone.legs, feet)]
    shape = [len(X) for X in feet]
    flat = np.ravel_multi_index(cols, shape) if len(apex) else np.zeros(0, dtype=np.int64)
    return function_from(apex, flat, lim.apex)


def pairing(fs: Sequence[FinDomFunction]) -> FinDomFunction:
    """
    Tuple together functions with a common domain: x -> (f_1(x), ..., f_k(x)).

    The codomain is TypeSet(tuple).
    """
    fs = list(fs)
    if not fs:
        raise ValueError("pairing needs at least one function")
    dom = fs[0].dom
    cols = [f.collect() for f in fs]
    values = list(zip(*cols)) if len(dom) else []
    return function_from(dom, values, TypeSet(tuple))


# Equalizers
#-----------

def equalizer(homs: Sequence[FinDomFunction], diagram: Any = None) -> Limit:
    """
    Subset of the common domain where all functions agree, with its inclusion.

    The inclusion preserves the enumeration order of the domain; lim.incl
    holds its positions.
    """
    homs = list(homs)
    if not homs:
        raise ValueError("equalizer needs at least one function")
    X = homs[0].dom
    cols = [f.collect() for f in homs]
    first = cols[0]
    keep = [i for i in range(len(X)) if all(c[i] == first[i] for c in cols[1:])]
    incl = np.asarray(keep, dtype=np.int64)
    d = diagram if diagram is not None else ParallelMorphisms(tuple(homs))
    leg = leg_into(incl, X)
    return Limit(d, Multispan((leg,), FinSetInt(len(keep))), ConeKind.EQUALIZER, incl=incl)


def factor_through(incl: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """Positions in the apex of a sorted inclusion, raising if any is missing."""
    found = np.searchsorted(incl, positions)
    hit = found < len(incl)
    hit[hit] = incl[found[hit]] == positions[hit]
    if not np.all(hit):
        i = int(np.flatnonzero(~hit)[0])
        raise DomainError(int(positions[i]), "limit apex", "cone does not factor through the limit")
    return found


def universal_equalizer(lim: Limit, cone: Multispan) -> FinDomFunction:
    """Unique h with incl . h == cone leg."""
    if len(cone.legs) != 1:
        raise ValueError(f"Equalizer cone must have one leg, got {len(cone.legs)}")
    leg = cone.legs[0]
    X = lim.legs[0].codom
    found = factor_through(lim.incl, positions_in(leg.collect(), X))
    return function_from(_cone_apex(cone), found, lim.apex)


# Coproducts
#-----------

def initial(diagram: Any = None) -> Colimit:
    """The empty set, colimit of the empty diagram."""
    return Colimit(diagram, Multicospan((), FinSetInt(0)), CoconeKind.INITIAL)


def universal_initial(cocone: Multicospan) -> FinDomFunction:
    return VectorFunction([], _cone_apex(cocone), known_correct=True)


def coproduct(sets: Sequence[Any], diagram: Any = None) -> Colimit:
    """
    Disjoint union of finite sets with its inclusions.

    The elements of sets[j] occupy a contiguous block starting at
    sum(len(X) for X in sets[:j]).
    """
    sets = list(sets)
    d = diagram if diagram is not None else DiscreteDiagram(tuple(sets))
    if not sets:
        return initial(d)
    sizes = [len(X) for X in sets]
    offsets = np.concatenate(([0], np.cumsum(sizes)))
    apex = FinSetInt(int(offsets[-1]))
    legs = [
        function_from(X, list(range(int(offsets[j]), int(offsets[j + 1]))), apex)
        for j, X in enumerate(sets)
    ]
    return Colimit(d, Multicospan(legs, apex), CoconeKind.COPRODUCT)


def universal_coproduct(colim: Colimit, cocone: Multicospan) -> FinDomFunction:
    """The copairing [f_1, ..., f_k]: X_1 + ... + X_k -> A."""
    if len(cocone.legs) != len(colim.legs):
        raise ValueError(f"Cocone has {len(cocone.legs)} legs, coproduct has {len(colim.legs)}")
    values: List[Any] = []
    for f in cocone.legs:
        values.extend(f.collect())
    apex = _cone_apex(cocone)
    if is_skeletal(apex):
        return VectorFunction(values, apex)
    return VectorFunction(values, apex, known_correct=True)
