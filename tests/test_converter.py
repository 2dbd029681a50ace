"""Tests for the tree converter on hand-written event streams."""

import pytest

from iknow.converter import TreeConverter
from iknow.errors import ConversionError
from iknow.meta import Range
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


def convert(events):
    return TreeConverter(events.events, config={"enable_logger": False}).convert()


class TestTreeConverter:
    """Tests for TreeConverter.convert."""

    def test_literals(self, events):
        events.start("expr").string("str", "hi").end("expr")

        assert convert(events) == StrLit(value="hi")

    def test_boolean_literal(self, events):
        events.start("expr").flag("boolean", False).end("expr")

        assert convert(events) == BoolLit(value=False)

    def test_builtin_flag(self, events):
        events.start("expr").flag("opt").end("expr")

        assert convert(events) == ty_option()

    def test_last_expression_wins(self, events):
        """Test that a later value in the same slot replaces an earlier one."""
        events.start("expr").number("num", 1.0).number("num", 2.0).end("expr")

        assert convert(events) == NumLit(value=2.0)

    def test_tuple_keeps_order(self, events):
        events.start("expr").start("tup")
        events.string("item", "a")
        events.start("item").number("num", 1.0).end("item")
        events.string("item", "b")
        events.end("tup").end("expr")

        assert convert(events) == Tup(items=[StrLit(value="a"), NumLit(value=1.0), StrLit(value="b")])

    def test_unknown_events_are_ignored(self, events):
        """Test that unrecognized fields and nodes are skipped and recorded."""
        events.start("expr")
        events.string("comment", "// note")
        events.start("unknown").string("name", "x").end("unknown")
        events.number("num", 3.0)
        events.end("expr")
        converter = TreeConverter(events.events, config={"enable_logger": False})

        assert converter.convert() == NumLit(value=3.0)
        assert converter.ignored == [Range(1, 1), Range(2, 3)]

    def test_struct(self, events):
        events.start("expr").start("struct").string("name", "P")
        events.start("field").start("tup").string("item", "x")
        events.start("item").flag("string").end("item")
        events.end("tup").end("field")
        events.end("struct").end("expr")

        assert convert(events) == Struct(
            name=StrLit(value="P"),
            fields=[Tup(items=[StrLit(value="x"), ty_string()])],
        )

    def test_enum_with_generic_name(self, events):
        events.start("expr").start("enum")
        events.start("ava").string("a", "Opt").start("b").start("ty").string("name", ".T").end("ty").end("b").end("ava")
        events.string("item", "Some")
        events.end("enum").end("expr")

        assert convert(events) == Enum(
            name=Avatar(outer=StrLit(value="Opt"), inner=TypeRef(name=".T")),
            variants=[StrLit(value="Some")],
        )

    def test_avatar_keeps_first_outer(self, events):
        """Test that a repeated avatar name keeps the first one."""
        events.start("expr").start("ava")
        events.string("a", "X").string("a", "Y")
        events.start("b").flag("string").end("b")
        events.end("ava").end("expr")

        assert convert(events) == Avatar(outer=StrLit(value="X"), inner=ty_string())

    def test_enum_variant_path(self, events):
        events.start("expr").start("enum_var").string("ty", "EdgeDir").string("data", "Left").end("enum_var").end("expr")

        assert convert(events) == InstanceTy(ty=TypeRef(name="EdgeDir"), data=StrLit(value="Left"))

    def test_instance_by_class(self, events):
        events.start("expr").start("ins").number("class", 1.0)
        events.start("data").string("str", "x").end("data")
        events.end("ins").end("expr")

        assert convert(events) == Instance(class_index=1, data=StrLit(value="x"))

    def test_instance_without_data(self, events):
        events.start("expr").start("ins").number("class", 0.0).end("ins").end("expr")

        assert convert(events) == Instance(class_index=0, data=None)

    def test_instance_type_wins_over_class(self, events):
        """Test that a type makes an instance typed even if a class is given."""
        events.start("expr").start("ins").number("class", 0.0)
        events.start("ty").start("ty").string("name", "EdgeDir").end("ty").end("ty")
        events.end("ins").end("expr")

        assert convert(events) == InstanceTy(ty=TypeRef(name="EdgeDir"), data=None)

    @pytest.mark.parametrize("class_index", [-1.0, 0.5])
    def test_invalid_instance_class(self, events, class_index):
        events.start("expr").start("ins").number("class", class_index).end("ins").end("expr")

        with pytest.raises(ConversionError):
            convert(events)

    def test_struct_without_name_fails(self, events):
        events.start("expr").start("struct").end("struct").end("expr")

        with pytest.raises(ConversionError, match="could not convert meta data"):
            convert(events)

    def test_nested_failure_is_not_skipped(self, events):
        """Test that a node which was entered but failed aborts the whole conversion."""
        events.start("expr").start("tup")
        events.start("item").start("enum").string("item", "A").end("enum").end("item")
        events.end("tup").end("expr")

        with pytest.raises(ConversionError):
            convert(events)

    def test_empty_slot_fails(self, events):
        events.start("expr").end("expr")

        with pytest.raises(ConversionError):
            convert(events)

    def test_empty_stream_fails(self, events):
        with pytest.raises(ConversionError):
            convert(events)

    def test_unterminated_stream_fails(self, events):
        events.start("expr").number("num", 1.0)

        with pytest.raises(ConversionError):
            convert(events)

    def test_convert_resets_ignored(self, events):
        events.start("expr").string("comment", "x").number("num", 1.0).end("expr")
        converter = TreeConverter(events.events, config={"enable_logger": False})
        converter.convert()
        converter.convert()

        assert converter.ignored == [Range(1, 1)]
