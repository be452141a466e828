"""
catlim/colimits/named.py

Colimits that keep element names.

The colimit is computed in the skeleton (every object replaced by {0..n-1}),
then each class is named after an element that lands in it: layer-2 names
first, overwritten by layer-1 names. Classes that end up with the same name
are told apart by tagging every later occurrence: "x", "x#1", "x#2", ...
A tag that is already in use is skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from catlim.colimits.quotient import colimit_bipartite, universal_quotient
from catlim.diagrams.bipartite import BipartiteFreeDiagram
from catlim.diagrams.shapes import Multicospan
from catlim.limits.cone import CoconeKind, Colimit
from catlim.limits.products import positions_in
from catlim.sets.finset import FinSetCollection, FinSetInt
from catlim.sets.function import DictFunction, FinDomFunction, VectorFunction

logger = logging.getLogger(__name__)

Tagger = Callable[[Any, int], Any]


def default_tag(separator: str = "#") -> Tagger:
    """Tag strings as f"{x}{separator}{i}" and other values as (x, i)."""

    def tag(x: Any, i: int) -> Any:
        if isinstance(x, str):
            return f"{x}{separator}{i}"
        return (x, i)

    return tag


def unique_by_tagging(elems: List[Any], tag: Optional[Tagger] = None) -> List[Any]:
    """
    Make the names in elems distinct, in place.

    The first occurrence of a name is kept; later occurrences get
    tag(name, 1), tag(name, 2), ..., skipping tags that are already names.
    """
    if tag is None:
        tag = default_tag()
    taken = set(elems)
    counter: Dict[Any, int] = {}
    seen = set()
    for i, x in enumerate(elems):
        if x not in seen:
            seen.add(x)
            continue
        j = counter.get(x, 1)
        tagged = tag(x, j)
        while tagged in taken:
            j += 1
            tagged = tag(x, j)
        counter[x] = j + 1
        taken.add(tagged)
        elems[i] = tagged
        logger.debug("renamed duplicate %r to %r", x, tagged)
    return elems


def _skeleton(d: BipartiteFreeDiagram) -> BipartiteFreeDiagram:
    skel = BipartiteFreeDiagram()
    skel.add_vertices1([FinSetInt(len(X)) for X in d.ob1])
    skel.add_vertices2([FinSetInt(len(Y)) for Y in d.ob2])
    for e in d.edges():
        v = d.tgt[e]
        pos = positions_in(d.hom[e].collect(), d.ob2[v])
        skel.add_edge(d.src[e], v, VectorFunction(pos, skel.ob2[v], known_correct=True))
    return skel


def colimit_named(d: BipartiteFreeDiagram, tag: Optional[Tagger] = None) -> Colimit:
    """
    Colimit of a bipartite diagram whose apex is named after the diagram's
    elements.

    The apex is a FinSetCollection of distinct names; the legs are
    DictFunctions keyed by the elements of the layer-2 objects.
    """
    skel = _skeleton(d)
    colim = colimit_bipartite(skel)
    proj_legs = [leg.collect() for leg in colim.legs]

    names: List[Any] = [None] * len(colim.apex)
    for v, Y in enumerate(d.ob2):
        for i, y in enumerate(Y):
            names[proj_legs[v][i]] = y
    for u, X in enumerate(d.ob1):
        e = d.out_edges(u)[0]
        leg = proj_legs[d.tgt[e]]
        f = skel.hom[e].collect()
        for i, x in enumerate(X):
            names[leg[f[i]]] = x
    unique_by_tagging(names, tag)

    apex = FinSetCollection(tuple(names))
    legs: List[FinDomFunction] = [
        DictFunction({y: names[proj_legs[v][i]] for i, y in enumerate(Y)}, apex)
        for v, Y in enumerate(d.ob2)
    ]
    return Colimit(d, Multicospan(legs, apex), CoconeKind.NAMED, skeleton=colim)


def universal_named(colim: Colimit, cocone: Multicospan) -> FinDomFunction:
    """Factor a cocone through the named apex, via the skeletal colimit."""
    d = colim.diagram
    skel_legs = [
        VectorFunction([leg(y) for y in Y], cocone.apex, known_correct=True)
        for leg, Y in zip(cocone.legs, d.ob2)
    ]
    h = universal_quotient(colim.skeleton, Multicospan(skel_legs, cocone.apex))
    return DictFunction(dict(zip(colim.apex, h.collect())), cocone.apex)
