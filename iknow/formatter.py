"""Canonical text rendering of value trees.

The output is used to compare trees obtained in different ways, so it is
deterministic and has no options. It is not meant to be parsed back.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal

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
)


class CanonicalFormatter:
    def format(self, value: Value) -> str:
        if isinstance(value, TypeRef):
            return f"(ty {self._quote(value.name)})"
        if isinstance(value, StrLit):
            return self._quote(value.value)
        if isinstance(value, NumLit):
            return self._format_number(float(value.value))
        if isinstance(value, BoolLit):
            return "true" if value.value else "false"
        if isinstance(value, Avatar):
            return f"(ava {self.format(value.outer)} {self.format(value.inner)})"
        if isinstance(value, Tup):
            return "(tup " + "".join(f"{self.format(item)} " for item in value.items) + ")"
        if isinstance(value, Struct):
            return self._format_block("struct", value.name, value.fields)
        if isinstance(value, Enum):
            return self._format_block("enum", value.name, value.variants)
        if isinstance(value, Instance):
            return self._format_instance(str(value.class_index), value.data)
        if isinstance(value, InstanceTy):
            return self._format_instance(self.format(value.ty), value.data)
        raise TypeError(f"Unknown value type: {type(value).__name__}")

    def _format_block(self, keyword: str, name: Value, members: tuple[Value, ...]) -> str:
        body = "".join(f"{self.format(member)}, " for member in members)
        return f"{keyword} {self.format(name)} {{{body}}}"

    def _format_instance(self, head: str, data: Value | None) -> str:
        if data is None:
            return f"(ins {head})"
        return f"(ins {head} {self.format(data)})"

    def _quote(self, text: str) -> str:
        return json.dumps(text, ensure_ascii=False)

    def _format_number(self, number: float) -> str:
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "inf" if number > 0 else "-inf"
        if number.is_integer():
            return "-0" if number == 0 and math.copysign(1.0, number) < 0 else str(int(number))
        # shortest round-trip digits, never in exponent form
        return format(Decimal(repr(number)), "f")


_FORMATTER = CanonicalFormatter()


def render(value: Value) -> str:
    return _FORMATTER.format(value)


__all__ = ["CanonicalFormatter", "render"]
