"""
Sets module: finite sets, functions between them, and preimage indexes.
"""

from catlim.sets.finset import (
    AttrVar,
    FinSet,
    FinSetInt,
    FinSetCollection,
    TabularSet,
    VarSet,
    TypeSet,
    as_finset,
    is_skeletal,
)
from catlim.sets.index import PreimageIndex
from catlim.sets.function import (
    FinDomFunction,
    VectorFunction,
    DictFunction,
    CallableFunction,
    IdentityFunction,
    ConstantFunction,
    fin_function,
    fin_dom_function,
    identity,
    apply,
    is_indexed,
    preimage,
    ensure_indexed,
    force,
    compose,
    is_monic,
    is_epic,
    is_iso,
)
from catlim.sets.variable import VarFunction, LooseVarFunction, compose_var
from catlim.sets.subset import SubFinSet

__all__ = [
    "AttrVar",
    "FinSet",
    "FinSetInt",
    "FinSetCollection",
    "TabularSet",
    "VarSet",
    "TypeSet",
    "as_finset",
    "is_skeletal",
    "PreimageIndex",
    "FinDomFunction",
    "VectorFunction",
    "DictFunction",
    "CallableFunction",
    "IdentityFunction",
    "ConstantFunction",
    "fin_function",
    "fin_dom_function",
    "identity",
    "apply",
    "is_indexed",
    "preimage",
    "ensure_indexed",
    "force",
    "compose",
    "is_monic",
    "is_epic",
    "is_iso",
    "VarFunction",
    "LooseVarFunction",
    "compose_var",
    "SubFinSet",
]
