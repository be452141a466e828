"""
Tests for colimits: coproducts, coequalizers, pushouts, free diagrams and
variable sets.
"""

import pytest

from catlim import (
    AttrVar,
    BipartiteFreeDiagram,
    EmptyDiagram,
    FreeDiagram,
    InconsistentColimit,
    MalformedDiagram,
    Multicospan,
    Multispan,
    NotSurjective,
    ObjectPair,
    ParallelMorphisms,
    SingletonDiagram,
    VarFunction,
    VarSet,
    colimit,
    universal,
)
from catlim.colimits import IntDisjointSets, pass_to_quotient, quotient_projection
from catlim.limits import CoconeKind
from catlim.sets import FinSetInt, VectorFunction, compose, fin_function


class TestIntDisjointSets:
    def test_union_find(self):
        sets = IntDisjointSets(5)
        sets.union(0, 3)
        sets.union(3, 4)
        assert sets.in_same_set(0, 4)
        assert not sets.in_same_set(1, 2)
        assert sets.num_groups() == 3
        assert len(sets) == 5

    def test_union_is_idempotent(self):
        sets = IntDisjointSets(3)
        root = sets.union(0, 1)
        assert sets.union(1, 0) == root
        assert sets.num_groups() == 2

    def test_projection_numbers_classes_by_root(self):
        sets = IntDisjointSets(4)
        sets.union(1, 3)
        proj = quotient_projection(sets)
        assert proj.codom == FinSetInt(3)
        assert proj.collect() == [0, 1, 2, 1]


class TestCoproduct:
    def test_blocks(self):
        colim = colimit(ObjectPair(FinSetInt(2), FinSetInt(3)))
        assert colim.apex == FinSetInt(5)
        assert colim.kind is CoconeKind.COPRODUCT
        assert colim.legs[0].collect() == [0, 1]
        assert colim.legs[1].collect() == [2, 3, 4]

    def test_universal_copairing(self):
        colim = colimit(ObjectPair(FinSetInt(2), FinSetInt(3)))
        h = universal(colim, [fin_function([0, 1], 2), fin_function([1, 1, 0], 2)])
        assert h.collect() == [0, 1, 1, 1, 0]

    def test_initial(self):
        colim = colimit(EmptyDiagram())
        assert colim.apex == FinSetInt(0)
        assert colim.kind is CoconeKind.INITIAL
        h = universal(colim, Multicospan([], FinSetInt(2)))
        assert len(h.dom) == 0

    def test_singleton(self):
        colim = colimit(SingletonDiagram(FinSetInt(2)))
        assert colim.kind is CoconeKind.IDENTITY
        assert colim.legs[0].collect() == [0, 1]


class TestCoequalizer:
    def test_everything_identified(self):
        f = fin_function([0, 1], 3)
        g = fin_function([1, 2], 3)
        colim = colimit(ParallelMorphisms((f, g)))
        assert colim.apex == FinSetInt(1)
        assert colim.legs[0].collect() == [0, 0, 0]

    def test_constant_map_collapses_codomain(self):
        f = fin_function([0, 1, 2], 3)
        g = fin_function([0, 0, 0], 3)
        colim = colimit(ParallelMorphisms((f, g)))
        assert colim.apex == FinSetInt(1)
        assert colim.kind is CoconeKind.COEQUALIZER

    def test_partial(self):
        f = fin_function([0, 1], 4)
        g = fin_function([1, 2], 4)
        colim = colimit(ParallelMorphisms((f, g)))
        assert colim.apex == FinSetInt(2)
        assert colim.legs[0].collect() == [0, 0, 0, 1]

    def test_cocone_commutes(self):
        f = fin_function([0, 1, 3], 5)
        g = fin_function([2, 2, 4], 5)
        colim = colimit(ParallelMorphisms((f, g)))
        q = colim.legs[0]
        assert compose(f, q).collect() == compose(g, q).collect()

    def test_universal(self):
        colim = colimit(ParallelMorphisms((fin_function([0, 1], 4), fin_function([1, 2], 4))))
        h = universal(colim, [fin_function([1, 1, 1, 0], 2)])
        assert h.collect() == [1, 0]

    def test_inconsistent_cocone_raises(self):
        colim = colimit(ParallelMorphisms((fin_function([0, 1], 4), fin_function([1, 2], 4))))
        with pytest.raises(InconsistentColimit):
            universal(colim, [fin_function([0, 1, 1, 0], 2)])

    def test_pass_to_quotient_not_surjective(self):
        proj = VectorFunction([0, 0], FinSetInt(2))
        with pytest.raises(NotSurjective):
            pass_to_quotient(proj, fin_function([1, 1], 2))


class TestPushout:
    @pytest.fixture
    def colim(self):
        f = fin_function([0], 2)
        g = fin_function([1], 2)
        return colimit(Multispan([f, g]))

    def test_glues_one_point(self, colim):
        assert colim.apex == FinSetInt(3)
        assert colim.legs[0].collect() == [0, 1]
        assert colim.legs[1].collect() == [2, 0]
        assert colim.kind is CoconeKind.COMPOSITE

    def test_universal(self, colim):
        h = universal(colim, [fin_function([0, 1], 2), fin_function([1, 0], 2)])
        assert h.collect() == [0, 1, 1]

    def test_unpacks_to_apex_and_legs(self, colim):
        apex, legs = colim
        assert len(apex) == 3
        assert len(legs) == 2

    def test_layer_one_without_out_edges_raises(self):
        d = BipartiteFreeDiagram()
        d.add_vertex1(FinSetInt(2))
        d.add_vertex2(FinSetInt(2))
        with pytest.raises(MalformedDiagram) as exc:
            colimit(d)
        assert exc.value.layer == 1


class TestFreeDiagramColimit:
    def test_collapse(self):
        d = FreeDiagram()
        x, y = d.add_objects([2, 3])
        d.add_hom(x, y, fin_function([0, 0], 3))
        colim = colimit(d)
        assert colim.apex == FinSetInt(3)
        assert colim.legs[0].collect() == [0, 0]
        assert colim.legs[1].collect() == [0, 1, 2]

    def test_universal(self):
        d = FreeDiagram()
        x, y = d.add_objects([2, 3])
        d.add_hom(x, y, fin_function([0, 0], 3))
        colim = colimit(d)
        h = universal(colim, [fin_function([1, 1], 2), fin_function([1, 0, 0], 2)])
        assert h.collect() == [1, 0, 0]


class TestVarSetColimit:
    def _diagram(self, n1, n2):
        d = BipartiteFreeDiagram()
        d.add_vertices1([VarSet(1, int)] * n1)
        d.add_vertices2([VarSet(1, int)] * n2)
        return d

    def test_binding_propagates(self):
        d = self._diagram(1, 2)
        d.add_edge(0, 0, VarFunction([AttrVar(0)], 1, int))
        d.add_edge(0, 1, VarFunction([42], 1, int))
        colim = colimit(d)
        assert colim.kind is CoconeKind.VARSET
        assert colim.apex == VarSet(1, int)
        assert colim.legs[0].collect() == [42]
        assert colim.legs[1].collect() == [AttrVar(0)]

    def test_conflicting_bindings_raise(self):
        d = self._diagram(2, 2)
        d.add_edge(0, 0, VarFunction([AttrVar(0)], 1, int))
        d.add_edge(0, 1, VarFunction([5], 1, int))
        d.add_edge(1, 0, VarFunction([AttrVar(0)], 1, int))
        d.add_edge(1, 1, VarFunction([7], 1, int))
        with pytest.raises(InconsistentColimit):
            colimit(d)

    def test_variables_merged(self):
        d = self._diagram(1, 2)
        d.add_edge(0, 0, VarFunction([AttrVar(0)], 1, int))
        d.add_edge(0, 1, VarFunction([AttrVar(0)], 1, int))
        colim = colimit(d)
        assert colim.apex == VarSet(1, int)
        assert colim.legs[0].collect() == colim.legs[1].collect() == [AttrVar(0)]

    def test_universal(self):
        d = self._diagram(1, 2)
        d.add_edge(0, 0, VarFunction([AttrVar(0)], 1, int))
        d.add_edge(0, 1, VarFunction([42], 1, int))
        colim = colimit(d)
        h = universal(colim, [VarFunction([42], 0, int), VarFunction([7], 0, int)])
        assert h.collect() == [7]
