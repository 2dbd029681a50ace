"""Joining a format with separately written data records."""

from __future__ import annotations

from typing import Optional, Sequence

from iknow.formatter import render
from iknow.nodes import Instance, Tup, Value
from iknow.parser_manager import ParserManagerConfig, convert_document


def join_values(format_value: Value, data_value: Value) -> Tup:
    """One document holding the format followed by every record as an instance of it.

    Records are only taken from a tuple; any other data value contributes none.
    """
    joined: list[Value] = [format_value]
    if isinstance(data_value, Tup):
        joined.extend(Instance(class_index=0, data=record) for record in data_value.items)
    return Tup(items=joined)


def join_format_data(
    format_text: str,
    data_text: str,
    search_dirs: Sequence[str] = (),
    config: Optional[ParserManagerConfig] = None,
) -> str:
    format_value = convert_document(format_text, search_dirs, config=config)
    data_value = convert_document(data_text, search_dirs, config=config)
    return render(join_values(format_value, data_value))


__all__ = ["join_values", "join_format_data"]
