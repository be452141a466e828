"""
Tests for the limit-preserving rewrites of bipartite diagrams.
"""

import pytest

from catlim.diagrams import BipartiteFreeDiagram
from catlim.limits.preprocess import drop_unconstrained, equalize_all, pair_all
from catlim.sets import FinSetInt, IdentityFunction, TypeSet, fin_function


def _diagram(ob1, ob2, edges):
    d = BipartiteFreeDiagram()
    d.add_vertices1([FinSetInt(n) for n in ob1])
    d.add_vertices2([FinSetInt(n) for n in ob2])
    for u, v, values in edges:
        d.add_edge(u, v, fin_function(values, ob2[v]))
    return d


class TestEqualizeAll:
    def test_parallel_edges_are_equalized(self):
        d = _diagram([3], [2], [(0, 0, [0, 1, 1]), (0, 0, [0, 0, 1])])
        d_simple, inclusions = equalize_all(d)
        assert inclusions[0].collect() == [0, 2]
        assert d_simple.ob1 == [FinSetInt(2)]
        assert d_simple.ne == 1
        assert d_simple.hom[0].collect() == [0, 1]

    def test_no_parallel_edges_gives_identities(self):
        d = _diagram([3, 2], [2], [(0, 0, [0, 0, 1]), (1, 0, [0, 1])])
        d_simple, inclusions = equalize_all(d)
        assert all(isinstance(iota, IdentityFunction) for iota in inclusions)
        assert d_simple.ob1 == d.ob1
        assert d_simple.ne == d.ne

    def test_idempotent(self):
        d = _diagram([3], [2], [(0, 0, [0, 1, 1]), (0, 0, [0, 0, 1])])
        once, _ = equalize_all(d)
        twice, inclusions = equalize_all(once)
        assert twice.ob1 == once.ob1
        assert [h.collect() for h in twice.hom] == [h.collect() for h in once.hom]
        assert isinstance(inclusions[0], IdentityFunction)


class TestDropUnconstrained:
    def test_drops_single_in_edge_vertices(self):
        d = _diagram(
            [2, 2], [2, 3],
            [(0, 0, [0, 1]), (1, 0, [1, 1]), (0, 1, [2, 0])],
        )
        out = drop_unconstrained(d)
        assert out.nv1 == 2
        assert out.nv2 == 1
        assert out.ob2 == [FinSetInt(2)]
        assert out.ne == 2

    def test_unchanged_when_all_constrained(self):
        d = _diagram([2, 2], [2], [(0, 0, [0, 1]), (1, 0, [1, 1])])
        assert drop_unconstrained(d) is d


class TestPairAll:
    @pytest.fixture
    def diagram(self):
        return _diagram(
            [3, 2], [2, 2],
            [
                (0, 0, [0, 0, 1]),
                (0, 1, [1, 0, 1]),
                (1, 0, [0, 1]),
                (1, 1, [1, 1]),
            ],
        )

    def test_merges_vertices_with_same_in_neighbors(self, diagram):
        paired = pair_all(diagram)
        assert paired.nv2 == 1
        assert paired.ob2 == [TypeSet(tuple)]
        assert paired.ne == 2

    def test_tuples_ordered_by_target(self, diagram):
        paired = pair_all(diagram)
        homs = {paired.src[e]: paired.hom[e].collect() for e in paired.edges()}
        assert homs[0] == [(0, 1), (0, 0), (1, 1)]
        assert homs[1] == [(0, 1), (1, 1)]

    def test_distinct_in_neighbors_kept_apart(self):
        d = _diagram(
            [2, 2, 2], [2, 2],
            [(0, 0, [0, 1]), (1, 0, [0, 1]), (1, 1, [0, 1]), (2, 1, [1, 0])],
        )
        paired = pair_all(d)
        assert paired.nv2 == 2
        assert paired.ob2 == [FinSetInt(2), FinSetInt(2)]
