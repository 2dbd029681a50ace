"""Conversion of meta events into iknow value trees.

Each node shape is described by an ordered list of ``Rule``s. Inside a node
the converter repeatedly tries the rules in order; the first one that
consumes input files its result under the rule's slot. An event that no rule
accepts is skipped and its range recorded in ``ignored``. Once the node's end
event is reached the collected slots are assembled into a value, or the whole
conversion fails.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, NotRequired, Optional, Sequence, TypedDict

from iknow.cursor import Cursor, NoMatch
from iknow.errors import ConversionError
from iknow.logger import Logger
from iknow.meta import MetaEvent, Range
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
    Value,
    ty_arc,
    ty_bool,
    ty_box,
    ty_f64,
    ty_option,
    ty_self,
    ty_string,
    ty_usize,
    ty_vec,
)
from iknow.utils import resolve_config

Attempt = Callable[[Cursor], tuple[Range, Any]]
Found = dict[str, list[Any]]

BUILTIN_TYPES: tuple[tuple[str, Callable[[], TypeRef]], ...] = (
    ("self", ty_self),
    ("string", ty_string),
    ("usize", ty_usize),
    ("f64", ty_f64),
    ("bool", ty_bool),
    ("arc", ty_arc),
    ("box", ty_box),
    ("opt", ty_option),
    ("vec", ty_vec),
)


class ConversionFailure(Exception):
    """A node was entered but cannot produce a value."""


@dataclass(frozen=True, slots=True)
class Rule:
    slot: str
    attempt: Attempt


def field(read: Callable[[Cursor, str], tuple[Range, Any]], name: str, build: Callable[[Any], Any]) -> Attempt:
    def attempt(cursor: Cursor) -> tuple[Range, Any]:
        consumed, value = read(cursor, name)
        return consumed, build(value)

    return attempt


def _str_lit(text: str) -> StrLit:
    return StrLit(value=text)


def _type_ref(name: str) -> TypeRef:
    return TypeRef(name=name)


def _first(found: Found, slot: str) -> Any:
    if not found.get(slot):
        raise ConversionFailure(slot)
    return found[slot][0]


def _last(found: Found, slot: str) -> Any:
    if not found.get(slot):
        raise ConversionFailure(slot)
    return found[slot][-1]


def _optional(found: Found, slot: str) -> Any:
    values = found.get(slot)
    return values[-1] if values else None


class ConverterConfig(TypedDict):
    enable_logger: NotRequired[bool]


class ConverterConfigRequired(TypedDict):
    enable_logger: bool


DEFAULT_CONFIG: ConverterConfigRequired = {"enable_logger": True}


class TreeConverter:
    def __init__(self, events: Sequence[MetaEvent], config: Optional[ConverterConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "iknow.converter", "is_enabled": self.config["enable_logger"]}).logger
        self.events = events
        self.ignored: list[Range] = []
        self.rules = self._build_rules()

    def convert(self) -> Value:
        self.ignored = []
        self.logger.info(f"Converting {len(self.events)} meta events")
        try:
            _, value = self._convert_expr("expr", Cursor(self.events))
        except (NoMatch, ConversionFailure):
            self.logger.error("Could not convert meta data")
            raise ConversionError() from None
        self.logger.info(f"Converted {type(value).__name__}, ignored {len(self.ignored)} element(s)")
        return value

    def _build_rules(self) -> dict[str, list[Rule]]:
        read_string, read_number, read_flag = Cursor.read_string, Cursor.read_number, Cursor.read_flag
        name_rules = [
            Rule("name", field(read_string, "name", _str_lit)),
            Rule("name", self._convert_ava),
        ]
        return {
            "expr": [
                Rule("expr", self._convert_enum),
                Rule("expr", self._convert_struct),
                Rule("expr", self._convert_tup),
                Rule("expr", self._convert_ava),
                Rule("expr", self._convert_ty),
                Rule("expr", self._convert_enum_var),
                Rule("expr", self._convert_ins),
                *(Rule("expr", field(read_flag, flag, lambda _, build=build: build())) for flag, build in BUILTIN_TYPES),
                Rule("expr", field(read_string, "str", _str_lit)),
                Rule("expr", field(read_number, "num", lambda number: NumLit(value=number))),
                Rule("expr", field(read_flag, "boolean", lambda flag: BoolLit(value=flag))),
            ],
            "enum": [
                *name_rules,
                Rule("variants", self._expr("variant")),
                Rule("variants", field(read_string, "item", _str_lit)),
            ],
            "struct": [
                *name_rules,
                Rule("fields", self._expr("field")),
            ],
            "tup": [
                Rule("items", self._expr("item")),
                Rule("items", field(read_string, "item", _str_lit)),
            ],
            "ava": [
                Rule("a", field(read_string, "a", _str_lit)),
                Rule("a", self._expr("a")),
                Rule("b", self._expr("b")),
            ],
            "ty": [
                Rule("name", field(read_string, "name", _type_ref)),
            ],
            "enum_var": [
                Rule("ty", field(read_string, "ty", _type_ref)),
                Rule("ty", self._expr("ty")),
                Rule("data", field(read_string, "data", _str_lit)),
                Rule("data", self._expr("data")),
            ],
            "ins": [
                Rule("class", field(read_number, "class", float)),
                Rule("ty", self._expr("ty")),
                Rule("data", self._expr("data")),
            ],
        }

    # Walking -----------------------------------------------------------------
    def _walk(self, node: str, cursor: Cursor, shape: str | None = None) -> tuple[Range, Found]:
        """Walk the node called ``node`` using the rules of ``shape`` (defaults to ``node``)."""
        rules = self.rules[shape or node]
        start = cursor
        cursor = cursor.fork()
        cursor.commit(cursor.enter(node))
        found: Found = defaultdict(list)
        while not self._try_exit(cursor, node):
            slot, consumed, value = self._first_of(cursor, rules)
            cursor.commit(consumed)
            if slot is not None:
                found[slot].append(value)
        return cursor.span_since(start), found

    @staticmethod
    def _try_exit(cursor: Cursor, node: str) -> bool:
        try:
            consumed = cursor.exit(node)
        except NoMatch:
            return False
        cursor.commit(consumed)
        return True

    def _first_of(self, cursor: Cursor, rules: Sequence[Rule]) -> tuple[str | None, Range, Any]:
        for rule in rules:
            try:
                consumed, value = rule.attempt(cursor)
            except NoMatch:
                continue
            return rule.slot, consumed, value
        try:
            consumed = cursor.skip_one()
        except NoMatch:
            raise ConversionFailure("unterminated node") from None
        self.ignored.append(consumed)
        self.logger.debug(f"Ignoring {consumed.length} event(s) from {self.events[consumed.offset]}")
        return None, consumed, None

    # Shapes ------------------------------------------------------------------
    def _expr(self, node: str) -> Attempt:
        return partial(self._convert_expr, node)

    def _convert_expr(self, node: str, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk(node, cursor, shape="expr")
        return consumed, _last(found, "expr")

    def _convert_enum(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("enum", cursor)
        return consumed, Enum(name=_last(found, "name"), variants=found["variants"])

    def _convert_struct(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("struct", cursor)
        return consumed, Struct(name=_last(found, "name"), fields=found["fields"])

    def _convert_tup(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("tup", cursor)
        return consumed, Tup(items=found["items"])

    def _convert_ava(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("ava", cursor)
        return consumed, Avatar(outer=_first(found, "a"), inner=_last(found, "b"))

    def _convert_ty(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("ty", cursor)
        return consumed, _last(found, "name")

    def _convert_enum_var(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("enum_var", cursor)
        return consumed, InstanceTy(ty=_last(found, "ty"), data=_optional(found, "data"))

    def _convert_ins(self, cursor: Cursor) -> tuple[Range, Value]:
        consumed, found = self._walk("ins", cursor)
        data = _optional(found, "data")
        if found.get("ty"):
            return consumed, InstanceTy(ty=_last(found, "ty"), data=data)
        class_index = _last(found, "class")
        if class_index < 0 or not class_index.is_integer():
            raise ConversionFailure(f"invalid class index {class_index}")
        return consumed, Instance(class_index=int(class_index), data=data)


__all__ = ["TreeConverter", "ConverterConfig", "Rule", "BUILTIN_TYPES"]
