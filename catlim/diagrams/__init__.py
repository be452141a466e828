"""
Diagrams module: fixed shapes, free diagrams, and the bipartite normal form.
"""

from catlim.diagrams.shapes import (
    EmptyDiagram,
    SingletonDiagram,
    ObjectPair,
    DiscreteDiagram,
    ParallelMorphisms,
    Multispan,
    Multicospan,
    parallel_pair,
    span,
    cospan,
)
from catlim.diagrams.free import FreeDiagram
from catlim.diagrams.bipartite import (
    BipartiteFreeDiagram,
    bipartite_for_limit,
    bipartite_for_colimit,
)

__all__ = [
    "EmptyDiagram",
    "SingletonDiagram",
    "ObjectPair",
    "DiscreteDiagram",
    "ParallelMorphisms",
    "Multispan",
    "Multicospan",
    "parallel_pair",
    "span",
    "cospan",
    "FreeDiagram",
    "BipartiteFreeDiagram",
    "bipartite_for_limit",
    "bipartite_for_colimit",
]
