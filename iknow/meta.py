"""Named-node event stream shared by the meta parser and the tree converter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class MetaKind(Enum):
    START_NODE = auto()
    END_NODE = auto()
    BOOL = auto()
    F64 = auto()
    STRING = auto()


@dataclass(frozen=True, slots=True)
class Range:
    offset: int
    length: int

    @property
    def next_offset(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, slots=True)
class MetaEvent:
    kind: MetaKind
    name: str
    value: bool | float | str | None
    span: Range


__all__ = ["MetaKind", "Range", "MetaEvent"]
