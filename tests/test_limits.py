"""
Tests for limits: products, equalizers, the recursive join solver,
product-then-filter and tabular limits.
"""

import pytest

from catlim import (
    BipartiteFreeDiagram,
    DiscreteDiagram,
    EmptyDiagram,
    FreeDiagram,
    JoinAlgorithm,
    LimitAlgorithm,
    MalformedDiagram,
    Multicospan,
    Multispan,
    ObjectPair,
    ParallelMorphisms,
    SingletonDiagram,
    SolverConfig,
    TabularSet,
    limit,
    tabular_limit,
    universal,
)
from catlim.errors import DomainError
from catlim.limits import ConeKind
from catlim.limits.solver import cheapest_join_vertex
from catlim.sets import FinSetInt, compose, fin_function


def _tuples(lim):
    cols = [leg.collect() for leg in lim.legs]
    return sorted(zip(*cols))


def _chain():
    """X -> A <- Y -> B <- Z, with limit {(2, 1, 0), (2, 1, 1)}."""
    d = BipartiteFreeDiagram()
    d.add_vertices1([FinSetInt(3), FinSetInt(2), FinSetInt(2)])
    d.add_vertices2([FinSetInt(2), FinSetInt(2)])
    d.add_edge(0, 0, fin_function([0, 0, 1], 2))
    d.add_edge(1, 0, fin_function([0, 1], 2))
    d.add_edge(1, 1, fin_function([1, 0], 2))
    d.add_edge(2, 1, fin_function([0, 0], 2))
    return d


def _pullback_free():
    d = FreeDiagram()
    x, y, z = d.add_objects([3, 2, 2])
    d.add_hom(x, z, fin_function([0, 0, 1], 2))
    d.add_hom(y, z, fin_function([0, 1], 2))
    return d


class TestTerminal:
    def test_empty_diagram(self):
        lim = limit(EmptyDiagram())
        assert lim.apex == FinSetInt(1)
        assert lim.legs == ()
        assert lim.kind is ConeKind.TERMINAL

    def test_universal_is_constant(self):
        lim = limit(EmptyDiagram())
        h = universal(lim, Multispan([], FinSetInt(3)))
        assert h.collect() == [0, 0, 0]

    def test_singleton(self):
        lim = limit(SingletonDiagram(FinSetInt(3)))
        assert lim.apex == FinSetInt(3)
        assert lim.legs[0].collect() == [0, 1, 2]
        leg = fin_function([2, 2], 3)
        assert universal(lim, [leg]) is leg


class TestProduct:
    def test_c_order(self):
        lim = limit(ObjectPair(FinSetInt(2), FinSetInt(3)))
        assert lim.apex == FinSetInt(6)
        assert lim.kind is ConeKind.PRODUCT
        assert lim.legs[0].collect() == [0, 0, 0, 1, 1, 1]
        assert lim.legs[1].collect() == [0, 1, 2, 0, 1, 2]

    def test_universal_pairing(self):
        lim = limit(ObjectPair(FinSetInt(2), FinSetInt(3)))
        h = universal(lim, [fin_function([1, 0], 2), fin_function([2, 2], 3)])
        assert h.collect() == [5, 2]
        assert compose(h, lim.legs[1]).collect() == [2, 2]

    def test_empty_factor(self):
        lim = limit(ObjectPair(FinSetInt(0), FinSetInt(3)))
        assert len(lim.apex) == 0
        assert lim.legs[1].collect() == []

    def test_discrete_diagram(self):
        lim = limit(DiscreteDiagram((FinSetInt(2), FinSetInt(2), FinSetInt(2))))
        assert len(lim.apex) == 8
        assert lim.legs[2].collect() == [0, 1] * 4

    def test_named_factors(self):
        lim = limit(ObjectPair(FinSetInt(2), fin_function({"a": 0, "b": 1}, 2).dom))
        assert lim.legs[1].collect() == ["a", "b", "a", "b"]


class TestEqualizer:
    @pytest.fixture
    def lim(self):
        f = fin_function([0, 1, 2, 1], 3)
        g = fin_function([0, 2, 2, 1], 3)
        return limit(ParallelMorphisms((f, g)))

    def test_subset(self, lim):
        assert lim.apex == FinSetInt(3)
        assert lim.legs[0].collect() == [0, 2, 3]
        assert lim.kind is ConeKind.EQUALIZER

    def test_universal(self, lim):
        h = universal(lim, [fin_function([2, 0, 2], 4)])
        assert h.collect() == [1, 0, 1]

    def test_non_factoring_cone_raises(self, lim):
        with pytest.raises(DomainError):
            universal(lim, [fin_function([1], 4)])

    def test_single_morphism_is_identity_subset(self):
        lim = limit(ParallelMorphisms((fin_function([1, 0], 2),)))
        assert lim.legs[0].collect() == [0, 1]


class TestBipartiteSolver:
    @pytest.mark.parametrize("alg", list(JoinAlgorithm))
    def test_chain(self, alg):
        lim = limit(_chain(), alg)
        assert _tuples(lim) == [(2, 1, 0), (2, 1, 1)]

    def test_cheapest_vertex(self):
        assert cheapest_join_vertex(_chain()) == 1

    def test_cone_commutes(self):
        d = _chain()
        lim = limit(d)
        for e in d.edges():
            u, v = d.src[e], d.tgt[e]
            image = compose(lim.legs[u], d.hom[e]).collect()
            others = [compose(lim.legs[d.src[e2]], d.hom[e2]).collect() for e2 in d.in_edges(v)]
            assert all(image == other for other in others)

    def test_universal(self):
        lim = limit(_chain())
        h = universal(lim, [fin_function([2], 3), fin_function([1], 2), fin_function([0], 2)])
        assert compose(h, lim.legs[2]).collect() == [0]

    def test_parallel_edges(self):
        d = BipartiteFreeDiagram()
        d.add_vertex1(FinSetInt(3))
        d.add_vertex2(FinSetInt(2))
        d.add_edge(0, 0, fin_function([0, 1, 1], 2))
        d.add_edge(0, 0, fin_function([0, 0, 1], 2))
        lim = limit(d)
        assert lim.legs[0].collect() == [0, 2]

    def test_no_layer_two_is_product(self):
        d = BipartiteFreeDiagram()
        d.add_vertices1([FinSetInt(2), FinSetInt(2)])
        lim = limit(d)
        assert len(lim.apex) == 4

    def test_layer_two_without_in_edges_raises(self):
        d = BipartiteFreeDiagram()
        d.add_vertex1(FinSetInt(2))
        d.add_vertex2(FinSetInt(2))
        with pytest.raises(MalformedDiagram) as exc:
            limit(d)
        assert exc.value.layer == 2
        assert exc.value.vertex == 0


class TestFreeDiagramLimit:
    def test_pullback(self):
        lim = limit(_pullback_free())
        assert _tuples(lim) == [(0, 0, 0), (1, 0, 0), (2, 1, 1)]

    def test_product_then_filter_agrees(self):
        d = _pullback_free()
        lim = limit(d, LimitAlgorithm.COMPOSE_PRODUCT_EQUALIZER)
        assert lim.kind is ConeKind.COMPOSITE
        assert _tuples(lim) == _tuples(limit(d))
        assert lim.incl.tolist() == [0, 4, 11]

    def test_product_then_filter_universal(self):
        lim = limit(_pullback_free(), LimitAlgorithm.COMPOSE_PRODUCT_EQUALIZER)
        h = universal(lim, [fin_function([2], 3), fin_function([1], 2), fin_function([1], 2)])
        assert h.collect() == [2]

    def test_product_then_filter_needs_free_diagram(self):
        with pytest.raises(ValueError):
            limit(Multicospan([fin_function([0], 1)]), LimitAlgorithm.COMPOSE_PRODUCT_EQUALIZER)


class TestTabularLimit:
    @pytest.fixture
    def lim(self):
        return limit(Multicospan([fin_function([0, 0, 1], 2), fin_function([0, 1], 2)]))

    def test_columns(self, lim):
        tab = tabular_limit(lim, ["x", "y"])
        assert isinstance(tab.apex, TabularSet)
        assert len(tab.apex) == 3
        assert list(tab.apex.column("x")) == lim.legs[0].collect()
        assert tab.kind is ConeKind.TABULAR

    def test_legs_read_columns(self, lim):
        tab = tabular_limit(lim)
        row = next(iter(tab.apex))
        assert tab.legs[0](row) == row.x0
        assert tab.legs[1](row) == row.x1

    def test_universal(self, lim):
        tab = tabular_limit(lim, ["x", "y"])
        h = universal(tab, [fin_function([2], 3), fin_function([1], 2)])
        assert h.collect() == [(2, 1)]

    def test_wrong_number_of_names_raises(self, lim):
        with pytest.raises(ValueError):
            tabular_limit(lim, ["x"])


class TestConfig:
    def test_join_algorithm_from_config(self):
        cospan = Multicospan([fin_function([0, 0, 1], 2), fin_function([0, 1], 2)])
        config = SolverConfig(join_algorithm="nested_loop")
        assert config.join_algorithm is JoinAlgorithm.NESTED_LOOP
        assert _tuples(limit(cospan, config=config)) == [(0, 0), (1, 0), (2, 1)]

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            SolverConfig(join_algorithm="bogus")
        with pytest.raises(ValueError):
            SolverConfig(tag_separator="")
