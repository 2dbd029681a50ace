"""Value tree for the iknow notation.

Every format or data document converts into one recursive ``Value``. Nodes
are frozen pydantic models: equality and hashing are structural, and a
tree never changes after it has been built.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, NonNegativeInt


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeRef(Node):
    """Primitive or nominal type, e.g. ``String`` or ``EdgeDir``."""

    name: str


class StrLit(Node):
    value: str


class NumLit(Node):
    value: float


class BoolLit(Node):
    value: bool


class Avatar(Node):
    """Generic application, e.g. ``Option<.T>``.

    ``outer`` is the avatar (``Option``) and ``inner`` the core (``.T``).
    """

    outer: Value
    inner: Value


class Tup(Node):
    items: tuple[Value, ...] = ()


class Struct(Node):
    name: Value
    fields: tuple[Value, ...] = ()


class Enum(Node):
    name: Value
    variants: tuple[Value, ...] = ()


class Instance(Node):
    """Data whose type is the ``class_index``-th entry of an outer schema list."""

    class_index: NonNegativeInt
    data: Value | None = None


class InstanceTy(Node):
    """Data carrying its type inline."""

    ty: Value
    data: Value | None = None


Value = TypeRef | StrLit | NumLit | BoolLit | Avatar | Tup | Struct | Enum | Instance | InstanceTy

for _model in (Avatar, Tup, Struct, Enum, Instance, InstanceTy):
    _model.model_rebuild()


def ty_self() -> TypeRef:
    return TypeRef(name="Self")


def ty_arc() -> TypeRef:
    return TypeRef(name="Arc")


def ty_string() -> TypeRef:
    return TypeRef(name="String")


def ty_f64() -> TypeRef:
    return TypeRef(name="f64")


def ty_bool() -> TypeRef:
    return TypeRef(name="bool")


def ty_box() -> TypeRef:
    return TypeRef(name="box")


def ty_usize() -> TypeRef:
    return TypeRef(name="usize")


def ty_option() -> TypeRef:
    return TypeRef(name="Option")


def ty_vec() -> TypeRef:
    return TypeRef(name="Vec")


__all__ = [
    "Node",
    "TypeRef",
    "StrLit",
    "NumLit",
    "BoolLit",
    "Avatar",
    "Tup",
    "Struct",
    "Enum",
    "Instance",
    "InstanceTy",
    "Value",
    "ty_self",
    "ty_arc",
    "ty_string",
    "ty_f64",
    "ty_bool",
    "ty_box",
    "ty_usize",
    "ty_option",
    "ty_vec",
]
