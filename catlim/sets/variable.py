"""
catlim/sets/variable.py

Morphisms between variable sets.

A VarFunction is a map [n] -> T ⊎ [m]: each of the n source variables goes
either to one of m target variables (an AttrVar) or to a concrete value of
type T. Equivalently it is a map [n] + T -> [m] + T fixing T, and composition
is Kleisli composition: concrete values pass straight through, variables are
rewritten by the next map.

A LooseVarFunction additionally carries a "loose" function T -> T' that is
applied to concrete values, so composites can change the concrete type.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from catlim.errors import DomainError
from catlim.sets.finset import AttrVar, FinSetInt, VarSet
from catlim.sets.function import FinDomFunction, VectorFunction, fin_function


def _check_values(values: Sequence[Any], n_codom: int, concrete_type: Optional[type]) -> None:
    for i, y in enumerate(values):
        if isinstance(y, AttrVar):
            if not 0 <= y.val < n_codom:
                raise DomainError(y, VarSet(n_codom, concrete_type), f"value at index {i}")
        elif concrete_type is None or not isinstance(y, concrete_type):
            raise DomainError(y, VarSet(n_codom, concrete_type), f"value at index {i}")


class VarFunction:
    """
    Morphism of variable sets VarSet(n, T) -> VarSet(m, T).

    Args:
        values: image of each source variable: AttrVar(j) with j < m, or a
                concrete value of type T
        codom_size: m, the number of target variables
        concrete_type: T; None means no concrete values are allowed
    """

    def __init__(self, values: Sequence[Any], codom_size: int, concrete_type: Optional[type] = None):
        values = tuple(values)
        _check_values(values, codom_size, concrete_type)
        self.fun = VectorFunction(values, None, known_correct=True)
        self.codom_size = codom_size
        self.concrete_type = concrete_type

    @staticmethod
    def from_fin_function(f: FinDomFunction, concrete_type: Optional[type] = None) -> "VarFunction":
        """Lift f: [n] -> [m] to the variable map sending AttrVar(i) to AttrVar(f(i))."""
        return VarFunction([AttrVar(y) for y in f.collect()], len(f.codom), concrete_type)

    @staticmethod
    def identity(s: VarSet) -> "VarFunction":
        return VarFunction([AttrVar(i) for i in range(s.n)], s.n, s.concrete_type)

    @property
    def dom(self) -> VarSet:
        return VarSet(len(self.fun), self.concrete_type)

    @property
    def codom(self) -> VarSet:
        return VarSet(self.codom_size, self.concrete_type)

    def __call__(self, x: Any) -> Any:
        if isinstance(x, AttrVar):
            if not 0 <= x.val < len(self.fun):
                raise DomainError(x, self.dom, "argument outside domain")
            return self.fun.func[x.val]
        if self.concrete_type is not None and isinstance(x, self.concrete_type):
            return x
        raise DomainError(x, self.dom, "argument outside domain")

    def collect(self) -> List[Any]:
        return self.fun.collect()

    def __len__(self) -> int:
        return len(self.fun)

    def preimage(self, y: Any) -> Sequence[int]:
        """Source variable indices mapping to y (an AttrVar or concrete value)."""
        return self.fun.ensure_indexed().preimage(y)

    def to_fin_function(self) -> VectorFunction:
        """The underlying map [n] -> [m]; fails if any value is concrete."""
        out = []
        for i, y in enumerate(self.fun.func):
            if not isinstance(y, AttrVar):
                raise DomainError(y, FinSetInt(self.codom_size), f"concrete value at index {i}")
            out.append(y.val)
        return fin_function(out, self.codom_size)

    def is_monic(self) -> bool:
        vals = self.fun.func
        if any(not isinstance(y, AttrVar) for y in vals):
            return False
        return len(set(vals)) == len(vals)

    def is_epic(self) -> bool:
        hit = {y.val for y in self.fun.func if isinstance(y, AttrVar)}
        return len(hit) == self.codom_size

    def then(self, g: Any) -> "VarFunction":
        return compose_var(self, g)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VarFunction):
            return NotImplemented
        return (self.fun.func == other.fun.func and self.codom_size == other.codom_size
                and self.concrete_type == other.concrete_type)

    def __hash__(self) -> int:
        return hash((self.fun.func, self.codom_size, self.concrete_type))

    def __repr__(self) -> str:
        return f"VarFunction({list(self.fun.func)}, {self.codom_size})"


class LooseVarFunction:
    """
    Variable map [n] -> T' ⊎ [m] together with a loose map T -> T'.

    Concrete values reached by composition are sent through the loose map
    instead of passing through unchanged.
    """

    def __init__(
        self,
        values: Sequence[Any],
        loose: Callable[[Any], Any],
        codom_size: int,
        source_type: Optional[type] = None,
        target_type: Optional[type] = None,
    ):
        values = tuple(values)
        _check_values(values, codom_size, target_type)
        self.fun = VectorFunction(values, None, known_correct=True)
        self.loose = loose
        self.codom_size = codom_size
        self.source_type = source_type
        self.target_type = target_type

    @property
    def dom(self) -> VarSet:
        return VarSet(len(self.fun), self.source_type)

    @property
    def codom(self) -> VarSet:
        return VarSet(self.codom_size, self.target_type)

    def __call__(self, x: Any) -> Any:
        if isinstance(x, AttrVar):
            if not 0 <= x.val < len(self.fun):
                raise DomainError(x, self.dom, "argument outside domain")
            return self.fun.func[x.val]
        return self.loose(x)

    def collect(self) -> List[Any]:
        return self.fun.collect()

    def then(self, g: "LooseVarFunction") -> "LooseVarFunction":
        return compose_var(self, g)

    def __repr__(self) -> str:
        return f"LooseVarFunction({list(self.fun.func)}, {self.codom_size})"


def compose_var(f: Any, g: Any) -> Any:
    """
    Compose variable maps diagrammatically (first f, then g).

    Supported pairs:
      VarFunction      ; VarFunction       Kleisli composite
      VarFunction      ; FinFunction       relabel target variables
      FinFunction      ; VarFunction       reindex source variables
      LooseVarFunction ; LooseVarFunction  loose maps compose too
    """
    if isinstance(f, LooseVarFunction) and isinstance(g, LooseVarFunction):
        if f.codom_size != len(g.fun):
            raise ValueError(f"Cannot compose: codomain {f.codom} != domain {g.dom}")
        vals = [g.fun.func[y.val] if isinstance(y, AttrVar) else g.loose(y) for y in f.fun.func]
        loose_f, loose_g = f.loose, g.loose
        return LooseVarFunction(vals, lambda x: loose_g(loose_f(x)), g.codom_size,
                                f.source_type, g.target_type)
    if isinstance(f, VarFunction) and isinstance(g, VarFunction):
        if f.codom_size != len(g.fun):
            raise ValueError(f"Cannot compose: codomain {f.codom} != domain {g.dom}")
        vals = [g.fun.func[y.val] if isinstance(y, AttrVar) else y for y in f.fun.func]
        return VarFunction(vals, g.codom_size, g.concrete_type)
    if isinstance(f, VarFunction) and isinstance(g, FinDomFunction):
        if f.codom_size != len(g.dom):
            raise ValueError(f"Cannot compose: codomain {f.codom} != domain {g.dom}")
        vals = [AttrVar(g(y.val)) if isinstance(y, AttrVar) else y for y in f.fun.func]
        return VarFunction(vals, len(g.codom), f.concrete_type)
    if isinstance(f, FinDomFunction) and isinstance(g, VarFunction):
        if len(f.codom) != len(g.fun):
            raise ValueError(f"Cannot compose: codomain {f.codom} != domain {g.dom}")
        vals = [g.fun.func[y] for y in f.collect()]
        return VarFunction(vals, g.codom_size, g.concrete_type)
    raise TypeError(f"Cannot compose {type(f).__name__} with {type(g).__name__}")
