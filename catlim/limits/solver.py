"""
catlim/limits/solver.py

Limits of general diagrams.

limit_bipartite: recursive join solver
  1. equalize parallel edges, drop unconstrained layer-2 vertices, pair
     layer-2 vertices with the same in-neighbors
  2. no layer-2 vertices left: the limit is the product of layer 1
  3. otherwise pull back the edges into the cheapest layer-2 vertex with a
     join, contract those layer-1 vertices into the join, and recurse
  4. build the cone back through the join legs and equalizer inclusions

limit_composite: product of all objects filtered by every function.
tabular_limit:   any limit re-expressed with a TabularSet apex.
"""

from __future__ import annotations

import logging
import math
import operator
from enum import Enum
from typing import Any, List, Optional, Sequence

import numpy as np

from catlim.diagrams.bipartite import BipartiteFreeDiagram
from catlim.diagrams.free import FreeDiagram
from catlim.diagrams.shapes import Multicospan, Multispan
from catlim.errors import MalformedDiagram
from catlim.limits.cone import ConeKind, Limit
from catlim.limits.joins import JoinAlgorithm, join
from catlim.limits.preprocess import drop_unconstrained, equalize_all, pair_all
from catlim.limits.products import (
    factor_through,
    function_from,
    leg_into,
    positions_in,
    product,
    universal_product,
)
from catlim.sets.finset import FinSetInt, TabularSet
from catlim.sets.function import CallableFunction, FinDomFunction, compose

logger = logging.getLogger(__name__)


class LimitAlgorithm(Enum):
    """Limit algorithms other than the join-based solver."""
    COMPOSE_PRODUCT_EQUALIZER = "compose_product_equalizer"


# Recursive join solver
#----------------------

def cheapest_join_vertex(d: BipartiteFreeDiagram) -> int:
    """
    Layer-2 vertex whose join has the smallest Cartesian product of inputs.

    Greedy: one step at a time, with no look-ahead over join orders.
    """
    costs = [math.prod(len(d.hom[e].dom) for e in d.in_edges(v)) for v in d.vertices2()]
    v = min(range(len(costs)), key=costs.__getitem__)
    logger.debug("join vertex %d, cost %d", v, costs[v])
    return v


def limit_bipartite(d: BipartiteFreeDiagram, alg: JoinAlgorithm = JoinAlgorithm.SMART) -> Limit:
    """
    Limit of a bipartite free diagram.

    The cone has one leg per layer-1 vertex, in vertex order.

    Raises:
        MalformedDiagram: a layer-2 vertex has no incoming edge.
    """
    for v in d.vertices2():
        if not d.in_edges(v):
            raise MalformedDiagram(v, 2, "no incoming edges")

    d_original = d
    d, inclusions = equalize_all(d)
    d = pair_all(drop_unconstrained(d))

    if d.nv2 == 0:
        if d.nv1 == 1:
            leg = inclusions[0]
            return Limit(d_original, Multispan((leg,), leg.dom), ConeKind.INDEXED)
        prod = product(d.ob1)
        legs = [compose(pi, iota) for pi, iota in zip(prod.legs, inclusions)]
        return Limit(d_original, Multispan(legs, prod.apex), ConeKind.INDEXED)

    v = cheapest_join_vertex(d)
    join_edges = d.in_edges(v)
    to_join = [d.src[e] for e in join_edges]
    to_keep = [u for u in d.vertices1() if u not in to_join]
    pb = join(Multicospan([d.hom[e] for e in join_edges]), alg)

    d_joined = BipartiteFreeDiagram()
    kept = {u: d_joined.add_vertex1(d.ob1[u]) for u in to_keep}
    joined = d_joined.add_vertex1(pb.apex)
    renumber = {w: d_joined.add_vertex2(d.ob2[w]) for w in d.vertices2() if w != v}
    for e in d.edges():
        u, w = d.src[e], d.tgt[e]
        if w == v:
            continue
        if u in kept:
            d_joined.add_edge(kept[u], renumber[w], d.hom[e])
        else:
            leg = pb.legs[to_join.index(u)]
            d_joined.add_edge(joined, renumber[w], compose(leg, d.hom[e]))

    lim = limit_bipartite(d_joined, alg)
    legs: List[Optional[FinDomFunction]] = [None] * d.nv1
    for i, u in enumerate(to_join):
        legs[u] = compose(lim.legs[joined], pb.legs[i], inclusions[u])
    for u, i in kept.items():
        legs[u] = compose(lim.legs[i], inclusions[u])
    return Limit(d_original, Multispan(legs, lim.apex), ConeKind.INDEXED)


# Product then filter
#--------------------

def limit_composite(d: FreeDiagram) -> Limit:
    """
    Limit of a free diagram as the subset of the product of all its objects
    on which every function f: s -> t satisfies f(x_s) == x_t.
    """
    obs = d.obs()
    prod = product(obs)
    cols = [f.collect() for f in prod.legs]
    keep = np.ones(len(prod.apex), dtype=bool)
    for s, t, f in d.homs():
        image = compose(prod.legs[s], f).collect()
        keep &= np.fromiter((a == b for a, b in zip(image, cols[t])), dtype=bool, count=len(image))
    incl = np.flatnonzero(keep).astype(np.int64)
    legs = [leg_into(positions_in(leg.collect(), X)[incl], X) for leg, X in zip(prod.legs, obs)]
    logger.debug("product-then-filter kept %d of %d tuples", len(incl), len(prod.apex))
    return Limit(d, Multispan(legs, FinSetInt(len(incl))), ConeKind.COMPOSITE, prod=prod, incl=incl)


def universal_composite(lim: Limit, cone: Multispan) -> FinDomFunction:
    """Factor a cone through the product, then through the filtered subset."""
    h = universal_product(lim.prod, cone)
    found = factor_through(lim.incl, np.asarray(h.collect(), dtype=np.int64))
    return function_from(cone.apex, found, lim.apex)


# Tabular limits
#---------------

def tabular_limit(lim: Limit, names: Optional[Sequence[str]] = None) -> Limit:
    """
    The same limit with apex a TabularSet whose columns are the leg values.

    The universal map of a cone sends each apex element to the row of its
    leg values.
    """
    if names is None:
        names = [f"x{i}" for i in range(len(lim.legs))]
    if len(names) != len(lim.legs):
        raise ValueError(f"Got {len(names)} column names for {len(lim.legs)} legs")
    table = TabularSet(tuple((name, tuple(f.collect())) for name, f in zip(names, lim.legs)))
    legs = [CallableFunction(operator.itemgetter(i), table, f.codom) for i, f in enumerate(lim.legs)]
    return Limit(lim.diagram, Multispan(legs, table), ConeKind.TABULAR)


def universal_tabular(lim: Limit, cone: Multispan) -> FinDomFunction:
    """Tupling: the row (f_1(x), ..., f_k(x)) for each apex element x."""
    table = lim.apex
    cols = [f.collect() for f in cone.legs]
    rows = [table.row_type(*vals) for vals in zip(*cols)] if cols else []
    return function_from(cone.apex, rows, table)
