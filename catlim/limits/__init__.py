"""
Limits module: products, equalizers, joins and the recursive limit solver.
"""

from catlim.limits.cone import ConeKind, CoconeKind, Limit, Colimit
from catlim.limits.products import (
    terminal,
    product,
    pairing,
    equalizer,
    initial,
    coproduct,
)
from catlim.limits.joins import JoinAlgorithm, join
from catlim.limits.preprocess import equalize_all, drop_unconstrained, pair_all
from catlim.limits.solver import (
    LimitAlgorithm,
    cheapest_join_vertex,
    limit_bipartite,
    limit_composite,
    tabular_limit,
)

__all__ = [
    "ConeKind",
    "CoconeKind",
    "Limit",
    "Colimit",
    "terminal",
    "product",
    "pairing",
    "equalizer",
    "initial",
    "coproduct",
    "JoinAlgorithm",
    "join",
    "equalize_all",
    "drop_unconstrained",
    "pair_all",
    "LimitAlgorithm",
    "cheapest_join_vertex",
    "limit_bipartite",
    "limit_composite",
    "tabular_limit",
]
