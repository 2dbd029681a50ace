"""Tests for canonical rendering."""

import math

import pytest

from iknow.formatter import CanonicalFormatter, render
from iknow.nodes import (
    Avatar,
    BoolLit,
    Enum,
    Instance,
    InstanceTy,
    NumLit,
    StrLit,
    Struct,
    Tup,
    TypeRef,
    ty_option,
    ty_string,
)


class TestCanonicalFormatter:
    """Tests for CanonicalFormatter.format."""

    def setup_method(self):
        self.formatter = CanonicalFormatter()

    def test_type_reference(self):
        assert self.formatter.format(TypeRef(name="String")) == '(ty "String")'

    def test_string_is_quoted(self):
        """Test that strings are quoted and escaped."""
        assert self.formatter.format(StrLit(value="Ada")) == '"Ada"'
        assert self.formatter.format(StrLit(value='say "hi"\n')) == '"say \\"hi\\"\\n"'

    def test_booleans(self):
        assert self.formatter.format(BoolLit(value=True)) == "true"
        assert self.formatter.format(BoolLit(value=False)) == "false"

    @pytest.mark.parametrize(
        "number,expected",
        [
            (36.0, "36"),
            (-2.0, "-2"),
            (1.5, "1.5"),
            (0.1, "0.1"),
            (-0.25, "-0.25"),
            (1e20, "100000000000000000000"),
            (1e-7, "0.0000001"),
            (math.inf, "inf"),
            (-math.inf, "-inf"),
            (math.nan, "NaN"),
        ],
    )
    def test_numbers(self, number, expected):
        assert self.formatter.format(NumLit(value=number)) == expected

    def test_avatar(self):
        value = Avatar(outer=ty_option(), inner=TypeRef(name=".T"))

        assert self.formatter.format(value) == '(ava (ty "Option") (ty ".T"))'

    def test_tuple_separators(self):
        """Test that every tuple item is followed by a space."""
        assert self.formatter.format(Tup(items=[])) == "(tup )"
        assert self.formatter.format(Tup(items=[NumLit(value=1)])) == "(tup 1 )"
        assert self.formatter.format(Tup(items=[NumLit(value=1), StrLit(value="a")])) == '(tup 1 "a" )'

    def test_struct(self):
        field = Tup(items=[StrLit(value="name"), ty_string()])

        assert self.formatter.format(Struct(name=StrLit(value="P"), fields=[])) == 'struct "P" {}'
        assert (
            self.formatter.format(Struct(name=StrLit(value="P"), fields=[field]))
            == 'struct "P" {(tup "name" (ty "String") ), }'
        )

    def test_enum(self):
        """Test that every enum variant is followed by a comma and a space."""
        value = Enum(name=StrLit(value="EdgeDir"), variants=[StrLit(value="Left"), StrLit(value="Right")])

        assert self.formatter.format(value) == 'enum "EdgeDir" {"Left", "Right", }'

    def test_instances(self):
        assert self.formatter.format(Instance(class_index=0)) == "(ins 0)"
        assert self.formatter.format(Instance(class_index=2, data=StrLit(value="x"))) == '(ins 2 "x")'
        assert (
            self.formatter.format(InstanceTy(ty=TypeRef(name="EdgeDir"), data=StrLit(value="Left")))
            == '(ins (ty "EdgeDir") "Left")'
        )
        assert self.formatter.format(InstanceTy(ty=TypeRef(name="Unit"))) == '(ins (ty "Unit"))'

    def test_unknown_value(self):
        with pytest.raises(TypeError):
            self.formatter.format("not a value")


class TestRender:
    """Tests for the module level render helper."""

    def test_render_matches_formatter(self):
        value = Tup(items=[Instance(class_index=0, data=Tup(items=[StrLit(value="Ada"), NumLit(value=36)]))])

        assert render(value) == '(tup (ins 0 (tup "Ada" 36 )) )'

    def test_equal_trees_render_equal(self):
        first = Avatar(outer=StrLit(value="Ty"), inner=ty_string())
        second = Avatar(outer=StrLit(value="Ty"), inner=ty_string())

        assert render(first) == render(second)
