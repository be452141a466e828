"""
catlim/limits/preprocess.py

Rewrites of bipartite diagrams that preserve the limit.

  equalize_all:        replace parallel edges u -> v by one edge out of the
                       equalizer of the parallel maps
  drop_unconstrained:  remove layer-2 vertices with a single incoming edge
  pair_all:            merge layer-2 vertices with the same in-neighbors
                       into one vertex over tuples

The cone over the rewritten diagram is turned back into a cone over the
input by composing with the inclusions returned by equalize_all.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from catlim.diagrams.bipartite import BipartiteFreeDiagram
from catlim.limits.products import equalizer, pairing
from catlim.sets.finset import TypeSet
from catlim.sets.function import FinDomFunction, IdentityFunction, compose

logger = logging.getLogger(__name__)


def equalize_all(d: BipartiteFreeDiagram) -> Tuple[BipartiteFreeDiagram, List[FinDomFunction]]:
    """
    Equalize parallel edges out of every layer-1 vertex.

    Returns:
        (d_simple, inclusions): d_simple has no parallel edges and
        inclusions[u] embeds its layer-1 object u into the original one.
        For a diagram without parallel edges every inclusion is an identity.
    """
    d_simple = BipartiteFreeDiagram()
    d_simple.add_vertices2(d.ob2)
    inclusions: List[FinDomFunction] = []
    for u in d.vertices1():
        groups: Dict[int, List[int]] = {}
        for e in d.out_edges(u):
            groups.setdefault(d.tgt[e], []).append(e)

        iota: FinDomFunction = IdentityFunction(d.ob1[u])
        for es in groups.values():
            if len(es) > 1:
                eq = equalizer([compose(iota, d.hom[e]) for e in es])
                iota = compose(eq.legs[0], iota)

        d_simple.add_vertex1(iota.dom)
        for v, es in groups.items():
            d_simple.add_edge(u, v, compose(iota, d.hom[es[0]]))
        if not isinstance(iota, IdentityFunction):
            logger.debug("equalized vertex %d: %d -> %d elements", u, len(d.ob1[u]), len(iota.dom))
        inclusions.append(iota)
    return d_simple, inclusions


def drop_unconstrained(d: BipartiteFreeDiagram) -> BipartiteFreeDiagram:
    """Remove layer-2 vertices with exactly one incoming edge, which impose no equation."""
    keep = [v for v in d.vertices2() if len(d.in_edges(v)) != 1]
    if len(keep) == d.nv2:
        return d
    out = BipartiteFreeDiagram()
    out.add_vertices1(d.ob1)
    renumber = {v: out.add_vertex2(d.ob2[v]) for v in keep}
    for e in d.edges():
        v = d.tgt[e]
        if v in renumber:
            out.add_edge(d.src[e], renumber[v], d.hom[e])
    logger.debug("dropped %d unconstrained layer-2 vertices", d.nv2 - len(keep))
    return out


def pair_all(d: BipartiteFreeDiagram) -> BipartiteFreeDiagram:
    """
    Merge layer-2 vertices that have the same multiset of in-neighbors.

    A merged vertex carries TypeSet(tuple); each in-neighbor u maps to it by
    x -> (f_1(x), ..., f_k(x)), the values of u's edges ordered by target
    vertex id. The input should have no parallel edges.
    """
    d_paired = BipartiteFreeDiagram()
    d_paired.add_vertices1(d.ob1)

    classes: Dict[Tuple[int, ...], List[int]] = {}
    for v in d.vertices2():
        classes.setdefault(tuple(sorted(d.in_neighbors(v))), []).append(v)

    for srcs, tgts in classes.items():
        in_edges = [sorted(d.in_edges(v), key=lambda e: d.src[e]) for v in tgts]
        if len(tgts) == 1:
            v = d_paired.add_vertex2(d.ob2[tgts[0]])
            for e in in_edges[0]:
                d_paired.add_edge(d.src[e], v, d.hom[e])
        else:
            v = d_paired.add_vertex2(TypeSet(tuple))
            for i, u in enumerate(srcs):
                d_paired.add_edge(u, v, pairing([d.hom[es[i]] for es in in_edges]))
    if d_paired.nv2 < d.nv2:
        logger.debug("paired layer 2: %d -> %d vertices", d.nv2, d_paired.nv2)
    return d_paired
