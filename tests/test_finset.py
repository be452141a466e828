"""
Tests for finite sets.
"""

import pytest

from catlim.errors import DomainError
from catlim.sets import (
    AttrVar,
    FinSetCollection,
    FinSetInt,
    TabularSet,
    TypeSet,
    VarSet,
    as_finset,
    is_skeletal,
)


class TestFinSetInt:
    def test_enumeration(self):
        s = FinSetInt(3)
        assert list(s) == [0, 1, 2]
        assert list(s) == list(s)
        assert len(s) == 3

    def test_membership(self):
        s = FinSetInt(3)
        assert 0 in s
        assert 2 in s
        assert 3 not in s
        assert -1 not in s
        assert True not in s
        assert "a" not in s

    def test_negative_size_raises(self):
        with pytest.raises(ValueError):
            FinSetInt(-1)

    def test_position(self):
        s = FinSetInt(4)
        assert s.position(2) == 2
        with pytest.raises(DomainError):
            s.position(4)

    def test_repr(self):
        assert repr(FinSetInt(3)) == "FinSet(3)"


class TestFinSetCollection:
    def test_keeps_order(self):
        s = as_finset(["b", "a", "c"])
        assert isinstance(s, FinSetCollection)
        assert list(s) == ["b", "a", "c"]
        assert s.elements() == ("b", "a", "c")

    def test_position(self):
        s = FinSetCollection(("a", "b"))
        assert s.position("b") == 1
        with pytest.raises(DomainError):
            s.position("z")

    def test_equality(self):
        assert FinSetCollection(["a", "b"]) == FinSetCollection(("a", "b"))
        assert not is_skeletal(FinSetCollection(("a",)))


class TestTabularSet:
    def test_rows(self):
        t = TabularSet.from_table({"x": [1, 2], "y": ["a", "b"]})
        rows = list(t)
        assert len(t) == 2
        assert rows[0].x == 1
        assert rows[1].y == "b"
        assert t.names == ("x", "y")
        assert t.column("y") == ("a", "b")

    def test_mismatched_columns_raise(self):
        with pytest.raises(ValueError):
            TabularSet.from_table({"x": [1, 2], "y": ["a"]})

    def test_membership(self):
        t = as_finset({"x": [1, 2]})
        assert isinstance(t, TabularSet)
        assert t.row_type(2) in t
        assert t.row_type(3) not in t

    def test_unknown_column(self):
        t = TabularSet.from_table({"x": [1]})
        with pytest.raises(KeyError):
            t.column("y")


class TestVarSet:
    def test_enumerates_variables(self):
        v = VarSet(2, int)
        assert list(v) == [AttrVar(0), AttrVar(1)]
        assert len(v) == 2

    def test_membership_with_concrete_type(self):
        v = VarSet(2, int)
        assert AttrVar(1) in v
        assert AttrVar(2) not in v
        assert 5 in v
        assert "a" not in v

    def test_membership_without_concrete_type(self):
        assert 5 not in VarSet(2)


class TestCoercion:
    def test_int(self):
        assert as_finset(3) == FinSetInt(3)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            as_finset(True)

    def test_type_set(self):
        assert 3 in TypeSet(int)
        assert "a" not in TypeSet(int)
        assert "a" in TypeSet(None)
