"""
catlim/diagrams/free.py

Free diagrams of finite sets.

A FreeDiagram is a directed multigraph whose vertices carry finite sets and
whose edges carry functions between them. It is stored as a networkx
MultiDiGraph with node attribute "ob" and edge attributes "hom" and "order";
"order" records insertion order so that edge enumeration is deterministic.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import networkx as nx

from catlim.sets.finset import as_finset


class FreeDiagram:
    """
    Free diagram: objects on vertices, functions on edges.
    """

    def __init__(self):
        self.g = nx.MultiDiGraph()
        self._n_edges = 0

    def add_object(self, ob: Any) -> int:
        """Add an object, returning its vertex id."""
        v = self.g.number_of_nodes()
        self.g.add_node(v, ob=as_finset(ob))
        return v

    def add_objects(self, obs: List[Any]) -> List[int]:
        return [self.add_object(ob) for ob in obs]

    def add_hom(self, s: int, t: int, hom: Any) -> int:
        """Add a function hom: ob(s) -> ob(t), returning its edge id."""
        if s not in self.g or t not in self.g:
            raise KeyError(f"Unknown vertex in edge {s} -> {t}")
        if len(hom.dom) != len(self.ob(s)):
            raise ValueError(f"edge {s} -> {t}: domain {hom.dom} does not match {self.ob(s)}")
        e = self._n_edges
        self._n_edges += 1
        self.g.add_edge(s, t, key=e, hom=hom, order=e)
        return e

    def ob(self, v: int) -> Any:
        return self.g.nodes[v]["ob"]

    def obs(self) -> List[Any]:
        return [self.g.nodes[v]["ob"] for v in sorted(self.g.nodes)]

    def homs(self) -> List[Tuple[int, int, Any]]:
        """Edges as (src, tgt, hom) in insertion order."""
        edges = sorted(self.g.edges(keys=True, data=True), key=lambda e: e[3]["order"])
        return [(s, t, data["hom"]) for s, t, _, data in edges]

    def nv(self) -> int:
        return self.g.number_of_nodes()

    def ne(self) -> int:
        return self.g.number_of_edges()

    def is_discrete(self) -> bool:
        return self.g.number_of_edges() == 0

    def __repr__(self) -> str:
        return f"FreeDiagram(nv={self.nv()}, ne={self.ne()})"
