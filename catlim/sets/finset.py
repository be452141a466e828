"""
catlim/sets/finset.py

Finite sets with a canonical enumeration.

Variants:
  - FinSetInt:        the skeletal set {0, ..., n-1}
  - FinSetCollection: wraps a finite Python collection
  - TabularSet:       rows of a column table, enumerated as named tuples
  - VarSet:           n attribute variables, optionally unified with a
                      concrete element type
  - TypeSet:          all values of a type (not finite); only used as the
                      codomain of functions out of a finite set

Enumeration order is part of the value: iterating twice yields the same
elements in the same order, and len() agrees with iteration.
"""

from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

import numpy as np

from catlim.errors import DomainError


@dataclass(frozen=True, order=True)
class AttrVar:
    """Placeholder for an attribute value that is not yet concrete."""
    val: int

    def __repr__(self) -> str:
        return f"AttrVar({self.val})"


class FinSet:
    """Interface shared by all finite sets."""

    def __iter__(self) -> Iterator[Any]:
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    def __contains__(self, x: Any) -> bool:
        raise NotImplementedError

    def elements(self) -> Tuple[Any, ...]:
        """Elements in enumeration order."""
        return tuple(self)

    def position(self, x: Any) -> int:
        """Position of x in the enumeration."""
        for i, y in enumerate(self):
            if y == x:
                return i
        raise DomainError(x, self)


@dataclass(frozen=True)
class FinSetInt(FinSet):
    """The finite set {0, ..., n-1}."""
    n: int

    def __post_init__(self):
        if self.n < 0:
            raise ValueError(f"FinSetInt size must be non-negative, got {self.n}")

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.n))

    def __len__(self) -> int:
        return self.n

    def __contains__(self, x: Any) -> bool:
        if isinstance(x, bool) or not isinstance(x, (int, np.integer)):
            return False
        return 0 <= x < self.n

    def elements(self) -> Tuple[int, ...]:
        return tuple(range(self.n))

    def position(self, x: Any) -> int:
        if x not in self:
            raise DomainError(x, self)
        return int(x)

    def __repr__(self) -> str:
        return f"FinSet({self.n})"


@dataclass(frozen=True)
class FinSetCollection(FinSet):
    """Finite set given by a Python collection, kept in its iteration order."""
    collection: Tuple[Any, ...]

    def __post_init__(self):
        if not isinstance(self.collection, tuple):
            object.__setattr__(self, "collection", tuple(self.collection))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.collection)

    def __len__(self) -> int:
        return len(self.collection)

    def __contains__(self, x: Any) -> bool:
        return x in self.collection

    def elements(self) -> Tuple[Any, ...]:
        return self.collection

    def position(self, x: Any) -> int:
        try:
            return self.collection.index(x)
        except ValueError:
            raise DomainError(x, self) from None

    def __repr__(self) -> str:
        return f"FinSet({list(self.collection)!r})"


@dataclass(frozen=True)
class TabularSet(FinSet):
    """
    Finite set whose elements are the rows of a table.

    The table is given as a mapping from column name to column values. All
    columns must have the same length. Rows are produced as named tuples of
    a row type derived from the column names.
    """
    columns: Tuple[Tuple[str, Tuple[Any, ...]], ...]
    row_type: Any = field(compare=False, repr=False, default=None)

    def __post_init__(self):
        cols = tuple((str(name), tuple(values)) for name, values in self.columns)
        lengths = {len(values) for _, values in cols}
        if len(lengths) > 1:
            raise ValueError(f"TabularSet columns have different lengths: {sorted(lengths)}")
        object.__setattr__(self, "columns", cols)
        if self.row_type is None:
            object.__setattr__(self, "row_type", namedtuple("Row", [name for name, _ in cols]))

    @staticmethod
    def from_table(table: Mapping[str, Sequence[Any]]) -> "TabularSet":
        return TabularSet(tuple(table.items()))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.columns)

    def column(self, name: str) -> Tuple[Any, ...]:
        for n, values in self.columns:
            if n == name:
                return values
        raise KeyError(f"No column {name!r} in table with columns {self.names}")

    def __iter__(self) -> Iterator[Any]:
        cols = [values for _, values in self.columns]
        for row in zip(*cols):
            yield self.row_type(*row)

    def __len__(self) -> int:
        if not self.columns:
            return 0
        return len(self.columns[0][1])

    def __contains__(self, x: Any) -> bool:
        return any(row == x for row in self)

    def __repr__(self) -> str:
        return f"TabularSet({len(self)} rows, columns={list(self.names)})"


@dataclass(frozen=True)
class VarSet(FinSet):
    """
    A set of n attribute variables, AttrVar(0) ... AttrVar(n-1).

    When concrete_type is given, the set is unified with that type: its
    members are the variables plus every value of concrete_type. Only the
    variables are enumerated.
    """
    n: int
    concrete_type: Optional[type] = None

    def __iter__(self) -> Iterator[AttrVar]:
        return (AttrVar(i) for i in range(self.n))

    def __len__(self) -> int:
        return self.n

    def __contains__(self, x: Any) -> bool:
        if isinstance(x, AttrVar):
            return 0 <= x.val < self.n
        return self.concrete_type is not None and isinstance(x, self.concrete_type)

    def position(self, x: Any) -> int:
        if isinstance(x, AttrVar) and 0 <= x.val < self.n:
            return x.val
        raise DomainError(x, self)

    def __repr__(self) -> str:
        t = "" if self.concrete_type is None else f", {self.concrete_type.__name__}"
        return f"VarSet({self.n}{t})"


@dataclass(frozen=True)
class TypeSet:
    """All values of a Python type; TypeSet(None) contains everything."""
    type_: Optional[type] = None

    def __contains__(self, x: Any) -> bool:
        return self.type_ is None or isinstance(x, self.type_)

    def __repr__(self) -> str:
        return "TypeSet(Any)" if self.type_ is None else f"TypeSet({self.type_.__name__})"


def is_skeletal(s: Any) -> bool:
    """Whether s is an object of the skeleton of FinSet, i.e. a FinSetInt."""
    return isinstance(s, FinSetInt)


def as_finset(x: Any) -> FinSet:
    """
    Coerce x to a FinSet.

    Accepts an existing FinSet, an int n (giving {0..n-1}), a mapping of
    columns (giving a TabularSet) or any finite iterable.
    """
    if isinstance(x, FinSet):
        return x
    if isinstance(x, bool):
        raise TypeError("Cannot build a FinSet from a bool")
    if isinstance(x, (int, np.integer)):
        return FinSetInt(int(x))
    if isinstance(x, Mapping):
        return TabularSet.from_table(x)
    if isinstance(x, Iterable):
        return FinSetCollection(tuple(x))
    raise TypeError(f"Cannot build a FinSet from {type(x).__name__}")


def as_codomain(x: Any) -> Any:
    """Like as_finset, but passes TypeSets and types through."""
    if isinstance(x, TypeSet):
        return x
    if isinstance(x, type):
        return TypeSet(x)
    if x is None:
        return TypeSet(None)
    return as_finset(x)
