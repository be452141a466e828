"""
catlim: limits and colimits of finite sets

Computes joins (limits) and gluings (colimits) of diagrams of finite sets
and functions, reducing each diagram to an apex set plus the legs of its
cone or cocone.

Key components:
- sets: finite sets, functions between them, preimage indexes, variable sets
- diagrams: fixed shapes, free diagrams, bipartite normal form
- limits: products, equalizers, join algorithms, recursive limit solver
- colimits: union-find quotients, variable-set and named colimits
- api: limit, colimit and universal entry points
"""

__version__ = "1.0.0"
__author__ = "catlim developers"

from catlim.errors import (
    CatlimError,
    DomainError,
    CospanTypeError,
    InconsistentColimit,
    NotSurjective,
    MalformedDiagram,
)
from catlim.config import SolverConfig, DEFAULT_CONFIG
from catlim.sets import (
    AttrVar,
    FinSet,
    FinSetInt,
    FinSetCollection,
    TabularSet,
    VarSet,
    TypeSet,
    fin_function,
    fin_dom_function,
    identity,
    compose,
    preimage,
    ensure_indexed,
    VarFunction,
    SubFinSet,
)
from catlim.diagrams import (
    EmptyDiagram,
    SingletonDiagram,
    ObjectPair,
    DiscreteDiagram,
    ParallelMorphisms,
    Multispan,
    Multicospan,
    FreeDiagram,
    BipartiteFreeDiagram,
)
from catlim.limits import JoinAlgorithm, LimitAlgorithm, Limit, Colimit, tabular_limit
from catlim.api import ColimitAlgorithm, limit, colimit, universal

__all__ = [
    # Errors
    "CatlimError",
    "DomainError",
    "CospanTypeError",
    "InconsistentColimit",
    "NotSurjective",
    "MalformedDiagram",
    # Configuration
    "SolverConfig",
    "DEFAULT_CONFIG",
    # Sets and functions
    "AttrVar",
    "FinSet",
    "FinSetInt",
    "FinSetCollection",
    "TabularSet",
    "VarSet",
    "TypeSet",
    "fin_function",
    "fin_dom_function",
    "identity",
    "compose",
    "preimage",
    "ensure_indexed",
    "VarFunction",
    "SubFinSet",
    # Diagrams
    "EmptyDiagram",
    "SingletonDiagram",
    "ObjectPair",
    "DiscreteDiagram",
    "ParallelMorphisms",
    "Multispan",
    "Multicospan",
    "FreeDiagram",
    "BipartiteFreeDiagram",
    # Limits and colimits
    "JoinAlgorithm",
    "LimitAlgorithm",
    "ColimitAlgorithm",
    "Limit",
    "Colimit",
    "limit",
    "colimit",
    "universal",
    "tabular_limit",
]
