"""
catlim/colimits/quotient.py

Colimits by coproduct-then-quotient.

Every element of the diagram's objects gets a slot in the coproduct (one
contiguous block per object). Identifications imposed by the functions are
unioned in an IntDisjointSets arena, and the colimit apex is the set of
classes, numbered by increasing root.
"""

from __future__ import annotations

import logging
from typing import Any, List

import numpy as np

from catlim.colimits.disjoint_sets import IntDisjointSets
from catlim.diagrams.bipartite import BipartiteFreeDiagram
from catlim.diagrams.free import FreeDiagram
from catlim.diagrams.shapes import Multicospan, ParallelMorphisms
from catlim.errors import InconsistentColimit, MalformedDiagram, NotSurjective
from catlim.limits.cone import CoconeKind, Colimit
from catlim.limits.products import coproduct, function_from, initial, positions_in, universal_coproduct
from catlim.sets.finset import FinSetInt
from catlim.sets.function import FinDomFunction, VectorFunction, compose

logger = logging.getLogger(__name__)


def quotient_projection(sets: IntDisjointSets) -> VectorFunction:
    """Projection onto the classes of sets, numbered by increasing root."""
    roots, labels = np.unique(sets.roots(), return_inverse=True)
    return VectorFunction(labels.reshape(-1), FinSetInt(len(roots)), known_correct=True)


def pass_to_quotient(proj: FinDomFunction, h: FinDomFunction) -> FinDomFunction:
    """
    Unique q with compose(proj, q) == h.

    Raises:
        InconsistentColimit: h takes two values on one class.
        NotSurjective: some class of proj has no element.
    """
    if len(proj.dom) != len(h.dom):
        raise ValueError(f"Cannot pass to quotient: {proj.dom} and {h.dom} differ in size")
    n = len(proj.codom)
    q: List[Any] = [None] * n
    seen = np.zeros(n, dtype=bool)
    for i, (j, y) in enumerate(zip(proj.collect(), h.collect())):
        if not seen[j]:
            q[j] = y
            seen[j] = True
        elif q[j] != y:
            raise InconsistentColimit(q[j], y, element=i)
    if not np.all(seen):
        raise NotSurjective(int(np.flatnonzero(~seen)[0]), "quotient projection is not surjective")
    return VectorFunction(q, h.codom, known_correct=True)


def _quotient_colimit(d: Any, coprod: Colimit, sets: IntDisjointSets, kind: CoconeKind) -> Colimit:
    proj = quotient_projection(sets)
    legs = [compose(leg, proj) for leg in coprod.legs]
    logger.debug("quotient of %d elements has %d classes", len(proj.dom), len(proj.codom))
    return Colimit(d, Multicospan(legs, proj.codom), kind, coprod=coprod, proj=proj)


def coequalizer(para: ParallelMorphisms) -> Colimit:
    """Quotient of the common codomain by f_1(x) ~ ... ~ f_k(x)."""
    Y = para.codom
    sets = IntDisjointSets(len(Y))
    cols = [positions_in(f.collect(), Y) for f in para.homs]
    for col in cols[1:]:
        for a, b in zip(cols[0].tolist(), col.tolist()):
            sets.union(a, b)
    proj = quotient_projection(sets)
    leg = function_from(Y, proj.collect(), proj.codom)
    logger.debug("coequalizer of %d maps has %d classes", len(para), len(proj.codom))
    return Colimit(para, Multicospan((leg,), proj.codom), CoconeKind.COEQUALIZER, proj=proj)


def universal_coequalizer(colim: Colimit, cocone: Multicospan) -> FinDomFunction:
    if len(cocone.legs) != 1:
        raise ValueError(f"Coequalizer cocone must have one leg, got {len(cocone.legs)}")
    return pass_to_quotient(colim.proj, cocone.legs[0])


def colimit_bipartite(d: BipartiteFreeDiagram) -> Colimit:
    """
    Colimit of a bipartite free diagram.

    For each layer-1 element x, the images of x along consecutive outgoing
    edges are identified. The cocone has one leg per layer-2 vertex.

    Raises:
        MalformedDiagram: a layer-1 vertex has no outgoing edge.
    """
    for u in d.vertices1():
        if not d.out_edges(u):
            raise MalformedDiagram(u, 1, "no outgoing edges")
    if d.nv2 == 0:
        return initial(d)

    coprod = coproduct(d.ob2, diagram=d)
    offsets = np.concatenate(([0], np.cumsum([len(X) for X in d.ob2]))).astype(np.int64)
    sets = IntDisjointSets(int(offsets[-1]))

    def slots(e: int) -> np.ndarray:
        v = d.tgt[e]
        return offsets[v] + positions_in(d.hom[e].collect(), d.ob2[v])

    for u in d.vertices1():
        out = d.out_edges(u)
        for e1, e2 in zip(out, out[1:]):
            for a, b in zip(slots(e1).tolist(), slots(e2).tolist()):
                sets.union(a, b)
    return _quotient_colimit(d, coprod, sets, CoconeKind.COMPOSITE)


def colimit_free(d: FreeDiagram) -> Colimit:
    """Colimit of a free diagram: coproduct of all objects modulo x ~ f(x)."""
    obs = d.obs()
    if not obs:
        return initial(d)
    coprod = coproduct(obs, diagram=d)
    offsets = np.concatenate(([0], np.cumsum([len(X) for X in obs]))).astype(np.int64)
    sets = IntDisjointSets(int(offsets[-1]))
    for s, t, f in d.homs():
        targets = offsets[t] + positions_in(f.collect(), obs[t])
        for i, b in enumerate(targets.tolist()):
            sets.union(int(offsets[s]) + i, b)
    return _quotient_colimit(d, coprod, sets, CoconeKind.COMPOSITE)


def universal_quotient(colim: Colimit, cocone: Multicospan) -> FinDomFunction:
    """Copair the cocone on the coproduct, then pass to the quotient."""
    h = universal_coproduct(colim.coprod, cocone)
    return pass_to_quotient(colim.proj, h)
