"""
catlim/diagrams/bipartite.py

Bipartite free diagrams: the normal form for join and union-find computation.

A bipartite free diagram has two layers of objects and edges going only from
layer 1 to layer 2, each edge carrying a function from its layer-1 object to
its layer-2 object. Vertices and edges are integer ids in insertion order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from catlim.diagrams.free import FreeDiagram
from catlim.diagrams.shapes import (
    DiscreteDiagram,
    EmptyDiagram,
    Multicospan,
    Multispan,
    ObjectPair,
    ParallelMorphisms,
    SingletonDiagram,
)
from catlim.sets.function import IdentityFunction


class BipartiteFreeDiagram:
    """
    Mutable bipartite diagram, built fresh for each limit or colimit call.

    Maintains:
    - Layer-1 and layer-2 objects
    - Edges as parallel lists src, tgt, hom
    - Incidence lists per vertex
    """

    def __init__(self):
        self.ob1: List[Any] = []
        self.ob2: List[Any] = []
        self.src: List[int] = []
        self.tgt: List[int] = []
        self.hom: List[Any] = []
        self._out: Dict[int, List[int]] = {}
        self._in: Dict[int, List[int]] = {}

    def add_vertex1(self, ob: Any) -> int:
        u = len(self.ob1)
        self.ob1.append(ob)
        self._out[u] = []
        return u

    def add_vertex2(self, ob: Any) -> int:
        v = len(self.ob2)
        self.ob2.append(ob)
        self._in[v] = []
        return v

    def add_vertices1(self, obs: Sequence[Any]) -> List[int]:
        return [self.add_vertex1(ob) for ob in obs]

    def add_vertices2(self, obs: Sequence[Any]) -> List[int]:
        return [self.add_vertex2(ob) for ob in obs]

    def add_edge(self, u: int, v: int, hom: Any) -> int:
        """Add an edge u -> v carrying hom: ob1[u] -> ob2[v]."""
        if len(hom.dom) != len(self.ob1[u]):
            raise ValueError(
                f"edge {u} -> {v}: domain {hom.dom} does not match layer 1 object {self.ob1[u]}"
            )
        e = len(self.hom)
        self.src.append(u)
        self.tgt.append(v)
        self.hom.append(hom)
        self._out[u].append(e)
        self._in[v].append(e)
        return e

    @property
    def nv1(self) -> int:
        return len(self.ob1)

    @property
    def nv2(self) -> int:
        return len(self.ob2)

    @property
    def ne(self) -> int:
        return len(self.hom)

    def vertices1(self) -> range:
        return range(self.nv1)

    def vertices2(self) -> range:
        return range(self.nv2)

    def edges(self) -> range:
        return range(self.ne)

    def out_edges(self, u: int) -> List[int]:
        """Edges with source u, in insertion order."""
        return list(self._out[u])

    def in_edges(self, v: int) -> List[int]:
        """Edges with target v, in insertion order."""
        return list(self._in[v])

    def in_neighbors(self, v: int) -> List[int]:
        return [self.src[e] for e in self._in[v]]

    def __repr__(self) -> str:
        return f"BipartiteFreeDiagram(nv1={self.nv1}, nv2={self.nv2}, ne={self.ne})"


def bipartite_for_limit(d: Any) -> BipartiteFreeDiagram:
    """
    Bipartite diagram with the same limit as d.

    Layer 1 holds the objects that receive limit legs; layer 2 holds the
    objects where equations are imposed.
    """
    if isinstance(d, BipartiteFreeDiagram):
        return d
    out = BipartiteFreeDiagram()
    if isinstance(d, (EmptyDiagram, SingletonDiagram, ObjectPair, DiscreteDiagram)):
        out.add_vertices1(d.obs)
    elif isinstance(d, Multicospan):
        out.add_vertices1(d.feet)
        v = out.add_vertex2(d.apex)
        for u, f in enumerate(d.legs):
            out.add_edge(u, v, f)
    elif isinstance(d, ParallelMorphisms):
        u = out.add_vertex1(d.dom)
        v = out.add_vertex2(d.codom)
        for f in d.homs:
            out.add_edge(u, v, f)
    elif isinstance(d, FreeDiagram):
        # Every object is a layer-1 vertex. Each target t of a function gets a
        # layer-2 copy t', joined to t by the identity, so that f: s -> t
        # imposes f(x_s) = x_t.
        out.add_vertices1(d.obs())
        copies: Dict[int, int] = {}
        for s, t, f in d.homs():
            if t not in copies:
                copies[t] = out.add_vertex2(d.ob(t))
                out.add_edge(t, copies[t], IdentityFunction(d.ob(t)))
            out.add_edge(s, copies[t], f)
    else:
        raise TypeError(f"No bipartite form for limit of {type(d).__name__}")
    return out


def bipartite_for_colimit(d: Any) -> BipartiteFreeDiagram:
    """
    Bipartite diagram with the same colimit as d.

    Layer 2 holds the objects that receive colimit legs; layer 1 holds the
    objects whose images are identified.
    """
    if isinstance(d, BipartiteFreeDiagram):
        return d
    out = BipartiteFreeDiagram()
    if isinstance(d, (EmptyDiagram, SingletonDiagram, ObjectPair, DiscreteDiagram)):
        out.add_vertices2(d.obs)
    elif isinstance(d, Multispan):
        u = out.add_vertex1(d.apex)
        out.add_vertices2(d.feet)
        for v, f in enumerate(d.legs):
            out.add_edge(u, v, f)
    elif isinstance(d, ParallelMorphisms):
        u = out.add_vertex1(d.dom)
        v = out.add_vertex2(d.codom)
        for f in d.homs:
            out.add_edge(u, v, f)
    elif isinstance(d, FreeDiagram):
        # Dually, every object is a layer-2 vertex and each source s of a
        # function gets a layer-1 copy s' mapping to s by the identity.
        out.add_vertices2(d.obs())
        copies: Dict[int, int] = {}
        for s, t, f in d.homs():
            if s not in copies:
                copies[s] = out.add_vertex1(d.ob(s))
                out.add_edge(copies[s], s, IdentityFunction(d.ob(s)))
            out.add_edge(copies[s], t, f)
    else:
        raise TypeError(f"No bipartite form for colimit of {type(d).__name__}")
    return out

