"""Predefined iknow schemas."""

from __future__ import annotations

from functools import cache

from iknow.nodes import (
    Avatar,
    Enum,
    StrLit,
    Struct,
    Tup,
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


def _variant(name: str, payload: Value) -> Avatar:
    return Avatar(outer=StrLit(value=name), inner=payload)


def _field(name: str, ty: Value) -> Tup:
    return Tup(items=[StrLit(value=name), ty])


def _struct(name: str, *fields: Tup) -> Struct:
    return Struct(name=StrLit(value=name), fields=fields)


@cache
def root_self() -> Enum:
    """The value model described in its own notation (see ``assets/self_root.txt``)."""
    boxed_self = Avatar(outer=ty_box(), inner=ty_self())
    self_list = Avatar(outer=ty_vec(), inner=ty_self())
    optional_data = Avatar(outer=ty_option(), inner=boxed_self)
    shared_string = Avatar(outer=ty_arc(), inner=ty_string())
    return Enum(
        name=StrLit(value="Root"),
        variants=[
            _variant("Ty", shared_string),
            _variant("Str", shared_string),
            _variant("F64", ty_f64()),
            _variant("Bool", ty_bool()),
            _variant("Avatar", Avatar(outer=ty_box(), inner=Tup(items=[ty_self(), ty_self()]))),
            _variant("Tup", self_list),
            _struct("Struct", _field("name", boxed_self), _field("fields", self_list)),
            _struct("Enum", _field("name", boxed_self), _field("variants", self_list)),
            _struct("Instance", _field("class", ty_usize()), _field("data", optional_data)),
            _struct("InstanceTy", _field("ty", boxed_self), _field("data", optional_data)),
        ],
    )


__all__ = ["root_self"]
