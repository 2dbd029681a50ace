"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from iknow.meta import MetaEvent, MetaKind, Range

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class EventBuilder:
    """Builds meta event streams by hand, without going through the parser."""

    def __init__(self):
        self.events: list[MetaEvent] = []

    def _add(self, kind: MetaKind, name: str, value=None) -> "EventBuilder":
        self.events.append(MetaEvent(kind, name, value, Range(len(self.events), 1)))
        return self

    def start(self, name: str) -> "EventBuilder":
        return self._add(MetaKind.START_NODE, name)

    def end(self, name: str) -> "EventBuilder":
        return self._add(MetaKind.END_NODE, name)

    def string(self, name: str, value: str) -> "EventBuilder":
        return self._add(MetaKind.STRING, name, value)

    def number(self, name: str, value: float) -> "EventBuilder":
        return self._add(MetaKind.F64, name, value)

    def flag(self, name: str, value: bool = True) -> "EventBuilder":
        return self._add(MetaKind.BOOL, name, value)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def events():
    """Fresh hand-written event stream builder."""
    return EventBuilder()


@pytest.fixture
def quiet_config():
    return {
        "lexer_config": {"enable_logger": False},
        "parser_config": {"enable_logger": False},
        "converter_config": {"enable_logger": False},
    }


@pytest.fixture
def temp_dir(tmp_path):
    return tmp_path
