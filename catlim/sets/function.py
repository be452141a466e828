"""
catlim/sets/function.py

Functions out of finite sets.

All representations share one interface:
  - dom, codom
  - f(x):            evaluate with a domain check (DomainError outside dom)
  - collect():       values in the enumeration order of dom
  - is_indexed():    whether preimage() is proportional to its output size
  - preimage(y):     domain elements mapping to y
  - ensure_indexed():equivalent indexed function, built at most once
  - then(g):         diagrammatic composition (first self, then g)

Representations:
  - VectorFunction:   dense vector of values over {0..n-1}; int64 ndarray when
                      the codomain is skeletal, tuple otherwise
  - DictFunction:     dictionary keyed by domain elements
  - CallableFunction: opaque Python callable
  - IdentityFunction, ConstantFunction

The index of an indexed function never takes part in equality.
"""

from __future__ import annotations

import threading
from functools import reduce
from typing import Any, Callable, List, Mapping, Optional, Sequence

import numpy as np

from catlim.errors import DomainError
from catlim.sets.finset import (
    FinSet,
    FinSetCollection,
    FinSetInt,
    TypeSet,
    as_codomain,
    as_finset,
    is_skeletal,
)
from catlim.sets.index import PreimageIndex


class FinDomFunction:
    """Interface shared by all functions out of a finite set."""

    dom: FinSet
    codom: Any

    def __init__(self):
        self._indexed: Optional["FinDomFunction"] = None
        self._lock = threading.Lock()

    def __call__(self, x: Any) -> Any:
        if x not in self.dom:
            raise DomainError(x, self.dom, "argument outside domain")
        return self._eval(x)

    def _eval(self, x: Any) -> Any:
        raise NotImplementedError

    def collect(self) -> List[Any]:
        """Values of the function, in the enumeration order of the domain."""
        return [self._eval(x) for x in self.dom]

    def is_indexed(self) -> bool:
        return False

    def preimage(self, y: Any) -> Sequence[Any]:
        """Linear scan fallback used by unindexed functions."""
        return tuple(x for x in self.dom if self._eval(x) == y)

    def force(self) -> "FinDomFunction":
        """Materialize as a vector (skeletal domain) or dict (other domains)."""
        if is_skeletal(self.dom):
            return VectorFunction(self.collect(), self.codom, known_correct=True)
        return DictFunction({x: self._eval(x) for x in self.dom}, self.codom)

    def ensure_indexed(self) -> "FinDomFunction":
        if self.is_indexed():
            return self
        if self._indexed is None:
            with self._lock:
                if self._indexed is None:
                    self._indexed = self._build_indexed()
        return self._indexed

    def _build_indexed(self) -> "FinDomFunction":
        return self.force().ensure_indexed()

    def then(self, g: "FinDomFunction") -> "FinDomFunction":
        return compose(self, g)

    def is_fin_function(self) -> bool:
        """Whether the codomain is itself finite."""
        return isinstance(self.codom, FinSet)


class VectorFunction(FinDomFunction):
    """
    Function {0..n-1} -> Y given by the vector of its values.

    A vector of consecutive increasing integers counts as indexed even
    without an attached PreimageIndex: its preimages are computed by
    subtracting the first value.

    Args:
        values: the values f(0), ..., f(n-1)
        codom: codomain (FinSet, TypeSet, type or None for any)
        index: optional precomputed PreimageIndex
        known_correct: skip the codomain membership check
    """

    def __init__(
        self,
        values: Sequence[Any],
        codom: Any,
        *,
        index: Optional[PreimageIndex] = None,
        known_correct: bool = False,
    ):
        super().__init__()
        codom = as_codomain(codom)
        if is_skeletal(codom):
            func = _as_int_vector(values, codom, known_correct)
            n = func.shape[0]
            self._range = n == 0 or bool(np.all(np.diff(func) == 1))
        else:
            func = tuple(values)
            if not known_correct:
                for i, y in enumerate(func):
                    if y not in codom:
                        raise DomainError(y, codom, f"value at index {i}")
            n = len(func)
            self._range = False
        if index is not None and index.n_dom != n:
            raise ValueError(f"Index covers {index.n_dom} elements but function has {n}")
        self.func = func
        self.dom = FinSetInt(n)
        self.codom = codom
        self.index = index

    def _eval(self, x: Any) -> Any:
        y = self.func[x]
        return int(y) if isinstance(y, np.integer) else y

    def collect(self) -> List[Any]:
        if isinstance(self.func, np.ndarray):
            return self.func.tolist()
        return list(self.func)

    def is_indexed(self) -> bool:
        return self.index is not None or self._range

    def preimage(self, y: Any) -> Sequence[Any]:
        if self.index is not None:
            return self.index.lookup(y)
        if self._range:
            if len(self.func) == 0 or isinstance(y, bool) or not isinstance(y, (int, np.integer)):
                return ()
            start = int(self.func[0])
            i = y - start
            return (int(i),) if 0 <= i < len(self.func) else ()
        return super().preimage(y)

    def force(self) -> "VectorFunction":
        return self

    def _build_indexed(self) -> "VectorFunction":
        if isinstance(self.func, np.ndarray):
            idx = PreimageIndex.skeletal(self.func, len(self.codom))
        else:
            idx = PreimageIndex.generic(self.func)
        return VectorFunction(self.func, self.codom, index=idx, known_correct=True)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VectorFunction):
            return NotImplemented
        return self.codom == other.codom and self.collect() == other.collect()

    def __hash__(self) -> int:
        return hash((tuple(self.collect()), self.codom))

    def __len__(self) -> int:
        return len(self.func)

    def __repr__(self) -> str:
        suffix = ", index=True" if self.index is not None else ""
        if isinstance(self.codom, FinSet):
            return f"FinFunction({self.collect()}, {len(self.dom)}, {len(self.codom)}{suffix})"
        return f"FinDomFunction({self.collect()}, {self.dom}, {self.codom}{suffix})"


def _as_int_vector(values: Sequence[Any], codom: FinSetInt, known_correct: bool) -> np.ndarray:
    raw = np.asarray(values)
    if raw.size == 0:
        return np.zeros(0, dtype=np.int64)
    if raw.ndim != 1:
        raise ValueError(f"Function values must be one-dimensional, got shape {raw.shape}")
    if not np.issubdtype(raw.dtype, np.integer) or raw.dtype == np.bool_:
        bad = next(i for i, y in enumerate(values) if y not in codom)
        raise DomainError(values[bad], codom, f"value at index {bad}")
    func = raw.astype(np.int64, copy=False)
    if not known_correct:
        bad = np.flatnonzero((func < 0) | (func >= codom.n))
        if bad.size:
            i = int(bad[0])
            raise DomainError(int(func[i]), codom, f"value at index {i}")
    return func


class DictFunction(FinDomFunction):
    """Function whose domain is the key set of a dictionary."""

    def __init__(self, mapping: Mapping[Any, Any], codom: Any = None, *, index: Optional[PreimageIndex] = None):
        super().__init__()
        self.func = dict(mapping)
        self.dom = FinSetCollection(tuple(self.func.keys()))
        if codom is None:
            codom = FinSetCollection(tuple(dict.fromkeys(self.func.values())))
        self.codom = as_codomain(codom)
        self.index = index

    def _eval(self, x: Any) -> Any:
        return self.func[x]

    def collect(self) -> List[Any]:
        return list(self.func.values())

    def is_indexed(self) -> bool:
        return self.index is not None

    def preimage(self, y: Any) -> Sequence[Any]:
        if self.index is not None:
            return self.index.lookup(y)
        return super().preimage(y)

    def force(self) -> "DictFunction":
        return self

    def _build_indexed(self) -> "DictFunction":
        keys = self.dom.elements()
        idx = PreimageIndex.generic(list(self.func.values()), keys=keys)
        return DictFunction(self.func, self.codom, index=idx)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DictFunction):
            return NotImplemented
        return self.func == other.func and self.codom == other.codom

    def __hash__(self) -> int:
        return hash((tuple(self.func.items()), self.codom))

    def __repr__(self) -> str:
        return f"FinFunction({self.func!r}, {self.codom})"


class CallableFunction(FinDomFunction):
    """Function evaluated lazily by a Python callable."""

    def __init__(self, fn: Callable[[Any], Any], dom: Any, codom: Any):
        super().__init__()
        self.fn = fn
        self.dom = as_finset(dom)
        self.codom = as_codomain(codom)

    def _eval(self, x: Any) -> Any:
        return self.fn(x)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", "<callable>")
        return f"FinFunction({name}, {self.dom}, {self.codom})"


class IdentityFunction(FinDomFunction):
    """Identity on a finite set; always indexed."""

    def __init__(self, s: Any):
        super().__init__()
        self.dom = as_finset(s)
        self.codom = self.dom

    def _eval(self, x: Any) -> Any:
        return x

    def collect(self) -> List[Any]:
        return list(self.dom)

    def is_indexed(self) -> bool:
        return True

    def preimage(self, y: Any) -> Sequence[Any]:
        return (y,) if y in self.dom else ()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, IdentityFunction):
            return NotImplemented
        return self.dom == other.dom

    def __hash__(self) -> int:
        return hash(("id", self.dom))

    def __repr__(self) -> str:
        return f"id({self.dom})"


class ConstantFunction(FinDomFunction):
    """Function sending every element of dom to one value."""

    def __init__(self, value: Any, dom: Any, codom: Any):
        super().__init__()
        self.value = value
        self.dom = as_finset(dom)
        self.codom = as_codomain(codom)
        if value not in self.codom:
            raise DomainError(value, self.codom, "constant value")

    def _eval(self, x: Any) -> Any:
        return self.value

    def preimage(self, y: Any) -> Sequence[Any]:
        return tuple(self.dom) if y == self.value else ()

    def is_indexed(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"ConstantFunction({self.value!r}, {self.dom}, {self.codom})"


# Constructors
#-------------

def fin_function(
    f: Any,
    *args: Any,
    index: bool = False,
    known_correct: bool = False,
) -> FinDomFunction:
    """
    Construct a function between finite sets.

    fin_function(values)               codomain {0..max(values)}
    fin_function(values, codom)
    fin_function(values, dom, codom)   checks len(values) == len(dom)
    fin_function(mapping[, codom])
    fin_function(callable, dom, codom)

    Vector values are checked against the codomain unless known_correct.
    index=True attaches a preimage index up front.
    """
    if isinstance(f, FinDomFunction):
        return f
    if isinstance(f, Mapping):
        codom = as_finset(args[-1]) if args else None
        fn = DictFunction(f, codom)
        if not known_correct:
            for k, y in fn.func.items():
                if y not in fn.codom:
                    raise DomainError(y, fn.codom, f"value at key {k!r}")
        return fn.ensure_indexed() if index else fn
    if callable(f):
        if len(args) != 2:
            raise TypeError("fin_function(callable, dom, codom) needs a domain and a codomain")
        return CallableFunction(f, as_finset(args[0]), as_finset(args[1]))
    values = list(f) if not isinstance(f, np.ndarray) else f
    if not args:
        codom = FinSetInt(int(np.max(values)) + 1 if len(values) else 0)
    else:
        codom = as_finset(args[-1])
    if len(args) == 2:
        _check_length(values, as_finset(args[0]))
    fn = VectorFunction(values, codom, known_correct=known_correct)
    return fn.ensure_indexed() if index else fn


def fin_dom_function(f: Any, *args: Any, index: bool = False) -> FinDomFunction:
    """
    Construct a function out of a finite set into an arbitrary codomain.

    Like fin_function, but the codomain defaults to TypeSet(None) and may be
    a TypeSet or a Python type.
    """
    if isinstance(f, FinDomFunction):
        return f
    codom = as_codomain(args[-1]) if args else TypeSet(None)
    if isinstance(f, Mapping):
        fn = DictFunction(f, codom)
    elif callable(f):
        if len(args) != 2:
            raise TypeError("fin_dom_function(callable, dom, codom) needs a domain and a codomain")
        return CallableFunction(f, as_finset(args[0]), codom)
    else:
        values = list(f) if not isinstance(f, np.ndarray) else f
        if len(args) == 2:
            _check_length(values, as_finset(args[0]))
        fn = VectorFunction(values, codom)
    return fn.ensure_indexed() if index else fn


def _check_length(values: Sequence[Any], dom: FinSet) -> None:
    if len(values) != len(dom):
        raise ValueError(f"Length of vector {len(values)} does not match domain {dom}")


def identity(s: Any) -> IdentityFunction:
    return IdentityFunction(s)


# Operations
#-----------

def apply(f: FinDomFunction, x: Any) -> Any:
    """f(x), raising DomainError if x is outside dom(f)."""
    return f(x)


def is_indexed(f: FinDomFunction) -> bool:
    """Whether preimages of f can be computed without scanning the domain."""
    return f.is_indexed()


def preimage(f: FinDomFunction, y: Any) -> Sequence[Any]:
    """The domain elements x with f(x) == y."""
    return f.preimage(y)


def ensure_indexed(f: FinDomFunction) -> FinDomFunction:
    """An equivalent indexed function; the index is built once and memoized."""
    return f.ensure_indexed()


def force(f: FinDomFunction) -> FinDomFunction:
    return f.force()


def _compose2(f: FinDomFunction, g: FinDomFunction) -> FinDomFunction:
    if isinstance(f.codom, FinSet) and f.codom != g.dom:
        raise ValueError(f"Cannot compose: codomain {f.codom} != domain {g.dom}")
    if isinstance(f, IdentityFunction):
        return g
    if isinstance(g, IdentityFunction):
        return f
    if isinstance(f, ConstantFunction):
        return ConstantFunction(g._eval(f.value), f.dom, g.codom)
    if isinstance(f, VectorFunction):
        if (isinstance(g, VectorFunction) and isinstance(f.func, np.ndarray)
                and isinstance(g.func, np.ndarray)):
            return VectorFunction(g.func[f.func], g.codom, known_correct=True)
        return VectorFunction([g._eval(y) for y in f.collect()], g.codom, known_correct=True)
    if isinstance(f, DictFunction):
        return DictFunction({x: g._eval(y) for x, y in f.func.items()}, g.codom)
    return CallableFunction(lambda x: g._eval(f._eval(x)), f.dom, g.codom)


def compose(*fs: FinDomFunction) -> FinDomFunction:
    """Diagrammatic composite: compose(f, g)(x) == g(f(x))."""
    if not fs:
        raise ValueError("compose needs at least one function")
    return reduce(_compose2, fs)


# Predicates
#-----------

def is_monic(f: FinDomFunction) -> bool:
    values = f.collect()
    return len(set(values)) == len(values)


def is_epic(f: FinDomFunction) -> bool:
    if not isinstance(f.codom, FinSet):
        raise TypeError(f"is_epic needs a finite codomain, got {f.codom}")
    return len(set(f.collect())) == len(f.codom)


def is_iso(f: FinDomFunction) -> bool:
    return is_monic(f) and is_epic(f)
