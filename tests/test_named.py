"""
Tests for named colimits and duplicate-name tagging.
"""

import pytest

from catlim import (
    ColimitAlgorithm,
    FinSetCollection,
    Multispan,
    ObjectPair,
    SolverConfig,
    colimit,
    universal,
)
from catlim.colimits import default_tag, unique_by_tagging
from catlim.limits import CoconeKind
from catlim.sets import FinSetInt, fin_dom_function, fin_function


class TestTagging:
    def test_first_occurrence_keeps_name(self):
        assert unique_by_tagging(["x", "y", "x", "x"]) == ["x", "y", "x#1", "x#2"]

    def test_skips_tags_in_use(self):
        assert unique_by_tagging(["x", "x", "x#1"]) == ["x", "x#2", "x#1"]

    def test_non_string_names(self):
        assert unique_by_tagging([0, 0, 1]) == [0, (0, 1), 1]

    def test_custom_separator(self):
        assert unique_by_tagging(["a", "a"], default_tag("_")) == ["a", "a_1"]

    def test_distinct_names_untouched(self):
        names = ["a", "b", "c"]
        assert unique_by_tagging(names) is names
        assert names == ["a", "b", "c"]


class TestNamedColimit:
    def test_coproduct_of_named_sets(self):
        colim = colimit(ObjectPair(FinSetCollection(["x"]), FinSetCollection(["x"])))
        assert colim.kind is CoconeKind.NAMED
        assert list(colim.apex) == ["x", "x#1"]
        assert colim.legs[0]("x") == "x"
        assert colim.legs[1]("x") == "x#1"

    def test_separator_from_config(self):
        colim = colimit(
            ObjectPair(FinSetCollection(["x"]), FinSetCollection(["x"])),
            config=SolverConfig(tag_separator="_"),
        )
        assert list(colim.apex) == ["x", "x_1"]

    def test_requested_on_skeletal_sets(self):
        colim = colimit(ObjectPair(FinSetInt(1), FinSetInt(1)), ColimitAlgorithm.NAMED)
        assert list(colim.apex) == [0, (0, 1)]

    @pytest.fixture
    def pushout(self):
        f = fin_function({"x": "x"}, ["a", "x"])
        g = fin_function({"x": "x"}, ["x", "c"])
        return colimit(Multispan([f, g]))

    def test_pushout_names(self, pushout):
        assert list(pushout.apex) == ["a", "x", "c"]
        assert pushout.legs[0].collect() == ["a", "x"]
        assert pushout.legs[1].collect() == ["x", "c"]

    def test_layer_one_names_win(self):
        f = fin_dom_function({"s": "b"}, ["a", "b"])
        g = fin_dom_function({"s": "b"}, ["b", "c"])
        colim = colimit(Multispan([f, g]))
        assert list(colim.apex) == ["a", "s", "c"]

    def test_skeleton_kept(self, pushout):
        assert pushout.skeleton.apex == FinSetInt(3)

    def test_universal(self, pushout):
        h = universal(pushout, [
            fin_function({"a": 0, "x": 1}, 2),
            fin_function({"x": 1, "c": 1}, 2),
        ])
        assert h("a") == 0
        assert h("x") == 1
        assert h("c") == 1
        assert h.codom == FinSetInt(2)
