"""
Colimits module: union-find quotients, variable sets, and named colimits.
"""

from catlim.colimits.disjoint_sets import IntDisjointSets
from catlim.colimits.quotient import (
    quotient_projection,
    pass_to_quotient,
    coequalizer,
    colimit_bipartite,
    colimit_free,
)
from catlim.colimits.varsets import colimit_varsets
from catlim.colimits.named import colimit_named, default_tag, unique_by_tagging

__all__ = [
    "IntDisjointSets",
    "quotient_projection",
    "pass_to_quotient",
    "coequalizer",
    "colimit_bipartite",
    "colimit_free",
    "colimit_varsets",
    "colimit_named",
    "default_tag",
    "unique_by_tagging",
]
