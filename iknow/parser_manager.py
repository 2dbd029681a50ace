from pathlib import Path
from typing import NotRequired, Optional, Sequence, TypedDict

from iknow.converter import ConverterConfig, TreeConverter
from iknow.errors import SourceError
from iknow.lexer import Lexer, LexerConfig
from iknow.logger import Logger
from iknow.meta import MetaEvent, Range
from iknow.nodes import Value
from iknow.parser import MetaParser, ParserConfig
from iknow.utils import resolve_config


class ParserManagerConfig(TypedDict):
    lexer_config: NotRequired[LexerConfig]
    parser_config: NotRequired[ParserConfig]
    converter_config: NotRequired[ConverterConfig]


class ParserManagerConfigRequired(TypedDict):
    lexer_config: LexerConfig
    parser_config: ParserConfig
    converter_config: ConverterConfig


DEFAULT_CONFIG: ParserManagerConfigRequired = {
    "lexer_config": {},
    "parser_config": {},
    "converter_config": {},
}


class ParserManager:
    """Runs one source text through lexer, meta parser and tree converter.

    ``search_dirs`` is only used to locate files given by relative path.
    """

    def __init__(self, text: str, search_dirs: Sequence[str] = (), config: Optional[ParserManagerConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.search_dirs = list(search_dirs)
        self.input = text
        self.lexer = Lexer(self.input, config=self.config["lexer_config"])
        self.parser = MetaParser(self.lexer.tokenize(), config=self.config["parser_config"])
        self.events: list[MetaEvent] = self.parser.parse_document()
        self.converter = TreeConverter(self.events, config=self.config["converter_config"])
        self.value: Value = self.converter.convert()

    @property
    def ignored(self) -> list[Range]:
        return self.converter.ignored

    @classmethod
    def from_path(
        cls, path: str | Path, search_dirs: Sequence[str] = (), config: Optional[ParserManagerConfig] = None
    ) -> "ParserManager":
        source = resolve_source(path, search_dirs)
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            Logger(config={"name": "iknow.parser_manager"}).logger.error(f"Could not open {source}: {exc}")
            raise SourceError(str(path), exc) from exc
        return cls(text, search_dirs, config=config)


def resolve_source(path: str | Path, search_dirs: Sequence[str] = ()) -> Path:
    """First existing candidate among ``path`` and ``path`` under each search dir."""
    source = Path(path)
    if source.is_absolute() or source.exists():
        return source
    for directory in search_dirs:
        candidate = Path(directory) / source
        if candidate.exists():
            return candidate
    return source


def convert_document(
    text: str, search_dirs: Sequence[str] = (), config: Optional[ParserManagerConfig] = None
) -> Value:
    return ParserManager(text, search_dirs, config=config).value


def convert_file(
    path: str | Path, search_dirs: Sequence[str] = (), config: Optional[ParserManagerConfig] = None
) -> Value:
    return ParserManager.from_path(path, search_dirs, config=config).value


__all__ = [
    "ParserManager",
    "ParserManagerConfig",
    "convert_document",
    "convert_file",
    "resolve_source",
]
