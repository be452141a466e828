"""
catlim/api.py

Entry points: limit, colimit and universal.

limit and colimit dispatch on the diagram shape and the algorithm tag;
universal dispatches on the kind recorded in the result.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from catlim.colimits.named import colimit_named, default_tag, universal_named
from catlim.colimits.quotient import (
    coequalizer,
    colimit_bipartite,
    colimit_free,
    universal_coequalizer,
    universal_quotient,
)
from catlim.colimits.varsets import colimit_varsets, universal_varsets
from catlim.config import DEFAULT_CONFIG, SolverConfig
from catlim.diagrams.bipartite import BipartiteFreeDiagram, bipartite_for_colimit, bipartite_for_limit
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
from catlim.errors import DomainError
from catlim.limits.cone import CoconeKind, ConeKind, Colimit, Limit
from catlim.limits.joins import JoinAlgorithm, join
from catlim.limits.products import (
    coproduct,
    equalizer,
    function_from,
    initial,
    product,
    terminal,
    universal_coproduct,
    universal_equalizer,
    universal_initial,
    universal_product,
    universal_terminal,
)
from catlim.limits.solver import (
    LimitAlgorithm,
    limit_bipartite,
    limit_composite,
    universal_composite,
    universal_tabular,
)
from catlim.sets.finset import FinSet, VarSet, is_skeletal
from catlim.sets.function import FinDomFunction, IdentityFunction


class ColimitAlgorithm(Enum):
    DEFAULT = "default"
    NAMED = "named"


def _objects(d: Any) -> List[Any]:
    if isinstance(d, (EmptyDiagram, SingletonDiagram, ObjectPair, DiscreteDiagram)):
        return list(d.obs)
    if isinstance(d, ParallelMorphisms):
        return [d.dom, d.codom]
    if isinstance(d, Multispan):
        return [d.apex, *d.feet]
    if isinstance(d, Multicospan):
        return [*d.feet, d.apex]
    if isinstance(d, BipartiteFreeDiagram):
        return list(d.ob1) + list(d.ob2)
    if isinstance(d, FreeDiagram):
        return d.obs()
    raise TypeError(f"Unsupported diagram type: {type(d).__name__}")


# Limits
#-------

def limit(
    diagram: Any,
    alg: Union[JoinAlgorithm, LimitAlgorithm, None] = None,
    config: Optional[SolverConfig] = None,
) -> Limit:
    """
    Limit of a diagram of finite sets.

    Args:
        diagram: EmptyDiagram, SingletonDiagram, ObjectPair, DiscreteDiagram,
                 ParallelMorphisms, Multicospan, BipartiteFreeDiagram or
                 FreeDiagram
        alg: join algorithm, or LimitAlgorithm.COMPOSE_PRODUCT_EQUALIZER
             for free diagrams; defaults to config.join_algorithm
        config: solver defaults

    Returns:
        Limit with apex and one leg per object receiving a projection
    """
    config = config or DEFAULT_CONFIG
    if alg is LimitAlgorithm.COMPOSE_PRODUCT_EQUALIZER:
        if not isinstance(diagram, FreeDiagram):
            raise ValueError(f"{alg.name} applies to FreeDiagram, got {type(diagram).__name__}")
        return limit_composite(diagram)
    join_alg = alg if isinstance(alg, JoinAlgorithm) else config.join_algorithm

    if isinstance(diagram, EmptyDiagram):
        return terminal(diagram)
    elif isinstance(diagram, SingletonDiagram):
        leg = IdentityFunction(diagram.ob)
        return Limit(diagram, Multispan((leg,), leg.dom), ConeKind.IDENTITY)
    elif isinstance(diagram, (ObjectPair, DiscreteDiagram)):
        return product(diagram.obs, diagram=diagram)
    elif isinstance(diagram, ParallelMorphisms):
        return equalizer(diagram.homs, diagram=diagram)
    elif isinstance(diagram, Multicospan):
        return join(diagram, join_alg)
    elif isinstance(diagram, BipartiteFreeDiagram):
        return limit_bipartite(diagram, join_alg)
    elif isinstance(diagram, FreeDiagram):
        lim = limit_bipartite(bipartite_for_limit(diagram), join_alg)
        return Limit(diagram, lim.cone, lim.kind)
    raise TypeError(f"No limit algorithm for {type(diagram).__name__}")


# Colimits
#---------

def colimit(
    diagram: Any,
    alg: Optional[ColimitAlgorithm] = None,
    config: Optional[SolverConfig] = None,
) -> Colimit:
    """
    Colimit of a diagram of finite sets.

    Diagrams over VarSets take the variable-set colimit. Diagrams with a
    non-skeletal finite set, or alg=ColimitAlgorithm.NAMED, take the named
    colimit, whose apex keeps element names.
    """
    config = config or DEFAULT_CONFIG
    obs = _objects(diagram)
    if any(isinstance(X, VarSet) for X in obs):
        return colimit_varsets(bipartite_for_colimit(diagram))
    named = alg is ColimitAlgorithm.NAMED or any(
        isinstance(X, FinSet) and not is_skeletal(X) for X in obs
    )
    if named:
        return colimit_named(bipartite_for_colimit(diagram), default_tag(config.tag_separator))

    if isinstance(diagram, EmptyDiagram):
        return initial(diagram)
    elif isinstance(diagram, SingletonDiagram):
        leg = IdentityFunction(diagram.ob)
        return Colimit(diagram, Multicospan((leg,), leg.codom), CoconeKind.IDENTITY)
    elif isinstance(diagram, (ObjectPair, DiscreteDiagram)):
        return coproduct(diagram.obs, diagram=diagram)
    elif isinstance(diagram, ParallelMorphisms):
        return coequalizer(diagram)
    elif isinstance(diagram, (Multispan, BipartiteFreeDiagram)):
        colim = colimit_bipartite(bipartite_for_colimit(diagram))
        return Colimit(diagram, colim.cocone, colim.kind, coprod=colim.coprod, proj=colim.proj)
    elif isinstance(diagram, FreeDiagram):
        return colimit_free(diagram)
    raise TypeError(f"No colimit algorithm for {type(diagram).__name__}")


# Universal property
#-------------------

def _as_cone(result: Any, cone: Any) -> Any:
    if isinstance(cone, (Multispan, Multicospan)):
        return cone
    legs = tuple(cone)
    if isinstance(result, Limit):
        return Multispan(legs)
    return Multicospan(legs)


def _universal_indexed(lim: Limit, cone: Multispan) -> FinDomFunction:
    if len(cone.legs) != len(lim.legs):
        raise ValueError(f"Cone has {len(cone.legs)} legs, limit has {len(lim.legs)}")
    index = lim.index()
    cols = [f.collect() for f in cone.legs]
    values = []
    for i in range(len(cone.apex)):
        key = tuple(c[i] for c in cols)
        if key not in index:
            raise DomainError(key, "limit", "cone does not factor through the limit")
        values.append(index[key])
    return function_from(cone.apex, values, lim.apex)


def universal(result: Union[Limit, Colimit], cone: Union[Multispan, Multicospan, Sequence[Any]]) -> Any:
    """
    The unique map from the apex of a competing cone to the limit apex, or
    from the colimit apex to the apex of a competing cocone.

    A cone may be given as a Multispan/Multicospan or as a sequence of legs.
    """
    cone = _as_cone(result, cone)
    if isinstance(result, Limit):
        kind = result.kind
        if kind is ConeKind.TERMINAL:
            return universal_terminal(cone)
        elif kind is ConeKind.IDENTITY:
            return cone.legs[0]
        elif kind is ConeKind.PRODUCT:
            return universal_product(result, cone)
        elif kind is ConeKind.EQUALIZER:
            return universal_equalizer(result, cone)
        elif kind is ConeKind.INDEXED:
            return _universal_indexed(result, cone)
        elif kind is ConeKind.COMPOSITE:
            return universal_composite(result, cone)
        elif kind is ConeKind.TABULAR:
            return universal_tabular(result, cone)
        raise ValueError(f"Unknown cone kind: {kind}")

    kind = result.kind
    if kind is CoconeKind.INITIAL:
        return universal_initial(cone)
    elif kind is CoconeKind.IDENTITY:
        return cone.legs[0]
    elif kind is CoconeKind.COPRODUCT:
        return universal_coproduct(result, cone)
    elif kind is CoconeKind.COEQUALIZER:
        return universal_coequalizer(result, cone)
    elif kind is CoconeKind.COMPOSITE:
        return universal_quotient(result, cone)
    elif kind is CoconeKind.VARSET:
        return universal_varsets(result, cone)
    elif kind is CoconeKind.NAMED:
        return universal_named(result, cone)
    raise ValueError(f"Unknown cocone kind: {kind}")
