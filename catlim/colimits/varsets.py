"""
catlim/colimits/varsets.py

Colimits of variable sets.

Objects are VarSets and edges are VarFunctions. Every variable of every
object gets a slot in an IntDisjointSets arena. An edge value AttrVar(j)
unions the source variable with target variable j; a concrete value binds
the source variable to it. The apex has one variable per class without a
binding, numbered in order of first root occurrence; bound classes are sent
to their concrete value.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import numpy as np

from catlim.colimits.disjoint_sets import IntDisjointSets
from catlim.diagrams.bipartite import BipartiteFreeDiagram
from catlim.diagrams.shapes import Multicospan
from catlim.errors import InconsistentColimit, NotSurjective
from catlim.limits.cone import CoconeKind, Colimit
from catlim.sets.finset import AttrVar, VarSet
from catlim.sets.variable import VarFunction

logger = logging.getLogger(__name__)


def _concrete_type(d: BipartiteFreeDiagram) -> Optional[type]:
    for X in list(d.ob1) + list(d.ob2):
        if isinstance(X, VarSet) and X.concrete_type is not None:
            return X.concrete_type
    return None


def colimit_varsets(d: BipartiteFreeDiagram) -> Colimit:
    """
    Colimit of a bipartite diagram of variable sets.

    Raises:
        InconsistentColimit: two different concrete values end up in one
        class.
    """
    sizes1 = [len(X) for X in d.ob1]
    sizes2 = [len(X) for X in d.ob2]
    off1 = np.concatenate(([0], np.cumsum(sizes1))).astype(np.int64)
    off2 = (np.concatenate(([0], np.cumsum(sizes2))) + off1[-1]).astype(np.int64)
    sets = IntDisjointSets(int(off2[-1]))

    bindings: Dict[int, Any] = {}
    for e in d.edges():
        s, t = d.src[e], d.tgt[e]
        for i, y in enumerate(d.hom[e].collect()):
            a = int(off1[s]) + i
            if isinstance(y, AttrVar):
                sets.union(a, int(off2[t]) + y.val)
            elif a in bindings and bindings[a] != y:
                raise InconsistentColimit(bindings[a], y, element=AttrVar(i))
            else:
                bindings[a] = y

    by_root: Dict[int, Any] = {}
    for a, y in bindings.items():
        r = sets.find_root(a)
        if r in by_root and by_root[r] != y:
            raise InconsistentColimit(by_root[r], y)
        by_root[r] = y

    fresh: Dict[int, int] = {}
    for a in range(len(sets)):
        r = sets.find_root(a)
        if r not in by_root and r not in fresh:
            fresh[r] = len(fresh)

    T = _concrete_type(d)
    if T is None and by_root:
        T = object
    legs: List[VarFunction] = []
    for v in d.vertices2():
        values = []
        for a in range(int(off2[v]), int(off2[v + 1])):
            r = sets.find_root(a)
            values.append(by_root[r] if r in by_root else AttrVar(fresh[r]))
        legs.append(VarFunction(values, len(fresh), T))
    apex = VarSet(len(fresh), T)
    logger.debug("variable colimit: %d fresh variables, %d bound classes", len(fresh), len(by_root))
    return Colimit(d, Multicospan(legs, apex), CoconeKind.VARSET)


def universal_varsets(colim: Colimit, cocone: Multicospan) -> VarFunction:
    """
    Map from the colimit apex to the cocone apex.

    Each apex variable is sent to the image, under the matching cocone leg,
    of any variable in its preimage.

    Raises:
        NotSurjective: an apex variable has no preimage under any leg.
    """
    apex = colim.apex
    target = cocone.apex
    values = []
    for p in apex:
        for leg, csp in zip(colim.legs, cocone.legs):
            pre = leg.preimage(p)
            if len(pre):
                values.append(csp(AttrVar(int(pre[0]))))
                break
        else:
            raise NotSurjective(p, "apex variable has no preimage in the colimit legs")
    T = getattr(target, "concrete_type", None) or apex.concrete_type
    return VarFunction(values, len(target), T)
