"""
catlim/diagrams/shapes.py

Fixed-shape diagrams of finite sets.

Shapes:
  - EmptyDiagram, SingletonDiagram, ObjectPair, DiscreteDiagram: objects only
  - ParallelMorphisms: n >= 1 functions with common domain and codomain
  - Multispan:  legs out of a common apex (also used as a limit cone)
  - Multicospan: legs into a common apex (also used as a colimit cocone)

Legs are validated when the shape is built, so that algorithms never see a
malformed (co)span.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence, Tuple

from catlim.errors import CospanTypeError
from catlim.sets.finset import FinSet, TypeSet


def compatible(a: Any, b: Any) -> bool:
    """
    Whether two (co)domains can be identified.

    Equal sets are compatible; a TypeSet is compatible with a set whose
    elements all belong to it, or with a TypeSet of the same type.
    """
    if a == b:
        return True
    if isinstance(a, TypeSet) and isinstance(b, TypeSet):
        return a.type_ is None or b.type_ is None or a.type_ is b.type_
    if isinstance(a, TypeSet) and isinstance(b, FinSet):
        return all(x in a for x in b)
    if isinstance(b, TypeSet) and isinstance(a, FinSet):
        return all(x in b for x in a)
    return False


@dataclass(frozen=True)
class EmptyDiagram:
    """Diagram with no objects."""

    @property
    def obs(self) -> Tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class SingletonDiagram:
    """Diagram with a single object and no morphisms."""
    ob: Any

    @property
    def obs(self) -> Tuple[Any, ...]:
        return (self.ob,)


@dataclass(frozen=True)
class ObjectPair:
    """Two objects, no morphisms."""
    first: Any
    second: Any

    @property
    def obs(self) -> Tuple[Any, ...]:
        return (self.first, self.second)


@dataclass(frozen=True)
class DiscreteDiagram:
    """Any number of objects, no morphisms."""
    obs: Tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "obs", tuple(self.obs))


@dataclass(frozen=True, eq=False)
class ParallelMorphisms:
    """Functions f_1, ..., f_n: X -> Y sharing domain and codomain."""
    homs: Tuple[Any, ...]

    def __post_init__(self):
        homs = tuple(self.homs)
        if not homs:
            raise ValueError("ParallelMorphisms needs at least one morphism")
        object.__setattr__(self, "homs", homs)
        X, Y = homs[0].dom, homs[0].codom
        for i, f in enumerate(homs[1:], start=1):
            if f.dom != X:
                raise CospanTypeError(i, X, f.dom)
            if not compatible(f.codom, Y):
                raise CospanTypeError(i, Y, f.codom)

    @property
    def dom(self) -> Any:
        return self.homs[0].dom

    @property
    def codom(self) -> Any:
        return self.homs[0].codom

    def __iter__(self) -> Iterator[Any]:
        return iter(self.homs)

    def __len__(self) -> int:
        return len(self.homs)

    def __getitem__(self, i: int) -> Any:
        return self.homs[i]


def parallel_pair(f: Any, g: Any) -> ParallelMorphisms:
    return ParallelMorphisms((f, g))


class Multispan:
    """
    Legs f_i: A -> X_i out of a common apex A.

    Doubles as the cone of a limit: the apex is the limit object and the
    legs are the projections.
    """

    def __init__(self, legs: Sequence[Any], apex: Optional[Any] = None):
        legs = tuple(legs)
        if apex is None:
            if not legs:
                raise ValueError("Multispan with no legs needs an explicit apex")
            apex = legs[0].dom
        for i, f in enumerate(legs):
            if f.dom != apex:
                raise CospanTypeError(i, apex, f.dom)
        self.apex = apex
        self.legs = legs

    @property
    def feet(self) -> Tuple[Any, ...]:
        return tuple(f.codom for f in self.legs)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.legs)

    def __len__(self) -> int:
        return len(self.legs)

    def __getitem__(self, i: int) -> Any:
        return self.legs[i]

    def __repr__(self) -> str:
        return f"Multispan(apex={self.apex}, legs={list(self.legs)})"


class Multicospan:
    """
    Legs f_i: X_i -> Y into a common apex Y.

    The limit of a multicospan is a multiway equi-join. Doubles as the cocone
    of a colimit.
    """

    def __init__(self, legs: Sequence[Any], apex: Optional[Any] = None):
        legs = tuple(legs)
        if apex is None:
            if not legs:
                raise ValueError("Multicospan with no legs needs an explicit apex")
            apex = legs[0].codom
        for i, f in enumerate(legs):
            if not compatible(f.codom, apex):
                raise CospanTypeError(i, apex, f.codom)
        self.apex = apex
        self.legs = legs

    @property
    def feet(self) -> Tuple[Any, ...]:
        return tuple(f.dom for f in self.legs)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.legs)

    def __len__(self) -> int:
        return len(self.legs)

    def __getitem__(self, i: int) -> Any:
        return self.legs[i]

    def __repr__(self) -> str:
        return f"Multicospan(apex={self.apex}, legs={list(self.legs)})"


def span(f: Any, g: Any) -> Multispan:
    return Multispan((f, g))


def cospan(f: Any, g: Any) -> Multicospan:
    return Multicospan((f, g))
