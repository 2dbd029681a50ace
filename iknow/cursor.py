"""Peek-and-commit cursor over a meta event stream.

Every read inspects the event at the current offset and either raises
``NoMatch`` or returns the range it would consume. Nothing moves until the
caller commits that range, so a failed attempt leaves the cursor where it
was. Sub-parsers work on a ``fork()`` and report back the range they used.
"""

from __future__ import annotations

from typing import Sequence

from iknow.meta import MetaEvent, MetaKind, Range


class NoMatch(Exception):
    """The next event is not the one that was asked for."""


class Cursor:
    __slots__ = ("events", "offset")

    def __init__(self, events: Sequence[MetaEvent], offset: int = 0):
        self.events = events
        self.offset = offset

    def __repr__(self) -> str:
        return f"Cursor(offset={self.offset}, remaining={len(self.events) - self.offset})"

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.events)

    def fork(self) -> Cursor:
        return Cursor(self.events, self.offset)

    def commit(self, consumed: Range) -> None:
        self.offset = consumed.next_offset

    def span_since(self, start: Cursor) -> Range:
        return Range(start.offset, self.offset - start.offset)

    def _expect(self, kind: MetaKind, name: str) -> MetaEvent:
        if self.at_end:
            raise NoMatch(f"expected {kind.name} '{name}', got end of stream")
        event = self.events[self.offset]
        if event.kind != kind or event.name != name:
            raise NoMatch(f"expected {kind.name} '{name}', got {event.kind.name} '{event.name}'")
        return event

    def _one(self) -> Range:
        return Range(self.offset, 1)

    def enter(self, name: str) -> Range:
        self._expect(MetaKind.START_NODE, name)
        return self._one()

    def exit(self, name: str) -> Range:
        self._expect(MetaKind.END_NODE, name)
        return self._one()

    def read_string(self, name: str) -> tuple[Range, str]:
        event = self._expect(MetaKind.STRING, name)
        return self._one(), event.value  # type: ignore[return-value]

    def read_number(self, name: str) -> tuple[Range, float]:
        event = self._expect(MetaKind.F64, name)
        return self._one(), event.value  # type: ignore[return-value]

    def read_flag(self, name: str) -> tuple[Range, bool]:
        event = self._expect(MetaKind.BOOL, name)
        return self._one(), event.value  # type: ignore[return-value]

    def skip_one(self) -> Range:
        """Range of the next element: one field, or a whole node up to its end event."""
        if self.at_end:
            raise NoMatch("nothing left to skip")
        event = self.events[self.offset]
        if event.kind != MetaKind.START_NODE:
            return self._one()
        depth = 0
        for index in range(self.offset, len(self.events)):
            kind = self.events[index].kind
            if kind == MetaKind.START_NODE:
                depth += 1
            elif kind == MetaKind.END_NODE:
                depth -= 1
                if depth == 0:
                    return Range(self.offset, index - self.offset + 1)
        raise NoMatch(f"node '{event.name}' is never closed")


__all__ = ["Cursor", "NoMatch"]
