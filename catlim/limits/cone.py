"""
catlim/limits/cone.py

Limit and colimit results.

A result holds the diagram, the (co)cone witnessing it, and a kind tag that
selects how the universal property is applied (see catlim.api.universal).

Lazy index:
  Limits of kind INDEXED answer the universal property through a dict from
  tuples of leg values to apex elements. The dict is only built the first
  time universal() needs it, under a lock, so a result may be shared between
  threads; once built it is never mutated.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from catlim.diagrams.shapes import Multicospan, Multispan


class ConeKind(Enum):
    """How the universal property of a limit is computed."""
    TERMINAL = 1      # apex {0}, no legs
    IDENTITY = 2      # limit of a single object
    PRODUCT = 3       # index arithmetic on the product grid
    EQUALIZER = 4     # search in the sorted inclusion
    INDEXED = 5       # lazy dict from leg values to apex elements
    COMPOSITE = 6     # product-then-filter
    TABULAR = 7       # apex rows are the tuples of leg values


class CoconeKind(Enum):
    """How the universal property of a colimit is computed."""
    INITIAL = 1       # apex {}, no legs
    IDENTITY = 2      # colimit of a single object
    COPRODUCT = 3     # concatenation of cocone legs
    COEQUALIZER = 4   # pass to quotient
    COMPOSITE = 5     # coproduct-then-quotient
    VARSET = 6        # variable sets with concrete bindings
    NAMED = 7         # named elements, computed in the skeleton


class Limit:
    """
    A limit of a diagram of finite sets.

    Attributes:
        diagram: The diagram (any shape).
        cone: Multispan from the apex to the limit legs' targets.
        kind: ConeKind tag.
        prod: Product used by COMPOSITE limits.
        incl: Sorted positions of the apex inside prod (EQUALIZER, COMPOSITE).
    """

    def __init__(
        self,
        diagram: Any,
        cone: Multispan,
        kind: ConeKind,
        *,
        prod: Optional["Limit"] = None,
        incl: Any = None,
    ):
        self.diagram = diagram
        self.cone = cone
        self.kind = kind
        self.prod = prod
        self.incl = incl
        self._index: Optional[Dict[Tuple[Any, ...], Any]] = None
        self._lock = threading.Lock()

    @property
    def apex(self) -> Any:
        return self.cone.apex

    @property
    def ob(self) -> Any:
        return self.cone.apex

    @property
    def legs(self) -> Tuple[Any, ...]:
        return self.cone.legs

    def index(self) -> Dict[Tuple[Any, ...], Any]:
        """Map from the tuple of leg values of an apex element to that element."""
        if self._index is None:
            with self._lock:
                if self._index is None:
                    self._index = make_limit_index(self.cone)
        return self._index

    def has_index(self) -> bool:
        return self._index is not None

    def __iter__(self) -> Iterator[Any]:
        return iter((self.apex, self.legs))

    def __repr__(self) -> str:
        return f"Limit({self.kind.name}, apex={self.apex}, legs={len(self.legs)})"


class Colimit:
    """
    A colimit of a diagram of finite sets.

    Attributes:
        diagram: The diagram (any shape).
        cocone: Multicospan from the diagram's objects to the apex.
        kind: CoconeKind tag.
        coprod: Coproduct used by COMPOSITE colimits.
        proj: Quotient projection from the coproduct (COEQUALIZER, COMPOSITE).
        skeleton: Colimit of the skeletal diagram (NAMED).
    """

    def __init__(
        self,
        diagram: Any,
        cocone: Multicospan,
        kind: CoconeKind,
        *,
        coprod: Optional["Colimit"] = None,
        proj: Any = None,
        skeleton: Optional["Colimit"] = None,
    ):
        self.diagram = diagram
        self.cocone = cocone
        self.kind = kind
        self.coprod = coprod
        self.proj = proj
        self.skeleton = skeleton

    @property
    def apex(self) -> Any:
        return self.cocone.apex

    @property
    def ob(self) -> Any:
        return self.cocone.apex

    @property
    def legs(self) -> Tuple[Any, ...]:
        return self.cocone.legs

    def __iter__(self) -> Iterator[Any]:
        return iter((self.apex, self.legs))

    def __repr__(self) -> str:
        return f"Colimit({self.kind.name}, apex={self.apex}, legs={len(self.legs)})"


def make_limit_index(cone: Multispan) -> Dict[Tuple[Any, ...], Any]:
    """Build the reverse map (leg values) -> apex element for a limit cone."""
    cols = [f.collect() for f in cone.legs]
    index: Dict[Tuple[Any, ...], Any] = {}
    for i, x in enumerate(cone.apex):
        index[tuple(c[i] for c in cols)] = x
    return index
