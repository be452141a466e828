"""
catlim/errors.py

Exception taxonomy for limit and colimit computations.

Every error is raised at the point where the offending leg, vertex or
element is known, and carries enough context to find it in the diagram.
"""

from __future__ import annotations

from typing import Any, Optional


class CatlimError(Exception):
    """Base class for all catlim errors."""


class DomainError(CatlimError, ValueError):
    """A value was used outside a function's domain or codomain."""

    def __init__(self, value: Any, where: Any, detail: str = ""):
        self.value = value
        self.where = where
        msg = f"{value!r} is not in {where}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class CospanTypeError(CatlimError, TypeError):
    """Legs of a cospan (or span) have incompatible codomains (domains)."""

    def __init__(self, leg: int, expected: Any, found: Any):
        self.leg = leg
        self.expected = expected
        self.found = found
        super().__init__(f"leg {leg}: expected {expected}, found {found}")


class InconsistentColimit(CatlimError):
    """Two distinct concrete values were identified by a colimit."""

    def __init__(self, first: Any, second: Any, element: Optional[Any] = None):
        self.first = first
        self.second = second
        self.element = element
        msg = f"cannot identify {first!r} with {second!r}"
        if element is not None:
            msg = f"{msg} (element {element!r})"
        super().__init__(msg)


class NotSurjective(CatlimError):
    """A (co)cone map is not jointly surjective, so no factoring map exists."""

    def __init__(self, element: Any, detail: str = ""):
        self.element = element
        msg = f"no preimage for element {element!r}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class MalformedDiagram(CatlimError, ValueError):
    """A diagram violates a shape assumption, e.g. an isolated vertex."""

    def __init__(self, vertex: int, layer: int, detail: str):
        self.vertex = vertex
        self.layer = layer
        super().__init__(f"layer {layer} vertex {vertex}: {detail}")
