"""Lexer for iknow notation source text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import NotRequired, Optional, TypedDict

from iknow.errors import NotationSyntaxError
from iknow.logger import Logger
from iknow.utils import resolve_config


class TokenType(Enum):
    IDENTIFIER = auto()
    KEYWORD = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    PUNCTUATION = auto()
    COMMENT = auto()
    EOF = auto()


@dataclass(slots=True)
class Token:
    type: TokenType
    value: str | float | bool | None
    line: int
    column: int
    offset: int
    length: int


KEYWORDS = {"enum", "struct", "ins"}
PUNCTUATION = set("{}()<>,:")
ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "0": "\0"}


class LexerError(NotationSyntaxError):
    pass


class LexerConfig(TypedDict):
    enable_logger: NotRequired[bool]


class LexerConfigRequired(TypedDict):
    enable_logger: bool


DEFAULT_CONFIG: LexerConfigRequired = {
    "enable_logger": True,
}


class Lexer:
    def __init__(self, text: str, config: Optional[LexerConfig] = None):
        self.text = text
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "iknow.lexer", "is_enabled": self.config["enable_logger"]}).logger
        self.tokens: list[Token] = []
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> list[Token]:
        self.logger.info("Starting tokenization")
        while not self._is_eof:
            char = self._peek()
            if char.isspace():
                self._consume_whitespace()
                continue
            if char == "/" and self._peek(1) in {"/", "*"}:
                self._emit_comment()
                continue
            if char == ":" and self._peek(1) == ":":
                self._emit_punctuation(2)
                continue
            if char in PUNCTUATION:
                self._emit_punctuation(1)
                continue
            if char == '"':
                self._emit_string()
                continue
            if char.isdigit() or (char in {"-", "+"} and self._peek(1).isdigit()):
                self._emit_number()
                continue
            if char.isalpha() or char in {"_", "."}:
                self._emit_identifier()
                continue
            raise LexerError(f"Unexpected character '{char}'", self._line, self._column)

        self._add_token(TokenType.EOF, None, self._line, self._column, self._pos)
        self.logger.info(f"Tokenization complete, {len(self.tokens)} tokens")
        return self.tokens

    def _add_token(self, token_type: TokenType, value, line: int, column: int, start: int) -> None:
        self.logger.debug(f"Adding token {token_type} with value {value!r} at line {line}, column {column}")
        self.tokens.append(Token(token_type, value, line, column, start, self._pos - start))

    def _consume_whitespace(self) -> None:
        while not self._is_eof and self._peek().isspace():
            self._advance()

    def _emit_comment(self) -> None:
        start, line, column = self._pos, self._line, self._column
        self._advance()
        if self._advance() == "/":
            while not self._is_eof and self._peek() != "\n":
                self._advance()
        else:
            while not (self._peek() == "*" and self._peek(1) == "/"):
                if self._is_eof:
                    raise LexerError("Unterminated block comment", line, column)
                self._advance()
            self._advance()
            self._advance()
        self._add_token(TokenType.COMMENT, self.text[start : self._pos], line, column, start)

    def _emit_punctuation(self, width: int) -> None:
        start, line, column = self._pos, self._line, self._column
        value = "".join(self._advance() for _ in range(width))
        self._add_token(TokenType.PUNCTUATION, value, line, column, start)

    def _emit_string(self) -> None:
        start, line, column = self._pos, self._line, self._column
        self._advance()
        buffer: list[str] = []
        while not self._is_eof:
            char = self._advance()
            if char == '"':
                self._add_token(TokenType.STRING, "".join(buffer), line, column, start)
                return
            if char == "\\":
                buffer.append(self._escape())
            else:
                buffer.append(char)
        raise LexerError("Unterminated string", line, column)

    def _escape(self) -> str:
        line, column = self._line, self._column
        if self._is_eof:
            raise LexerError("Unterminated escape sequence", line, column)
        char = self._advance()
        if char in ESCAPES:
            return ESCAPES[char]
        if char == "u" and self._peek() == "{":
            self._advance()
            digits: list[str] = []
            while not self._is_eof and self._peek() != "}":
                digits.append(self._advance())
            if self._is_eof or not digits:
                raise LexerError("Malformed unicode escape", line, column)
            self._advance()
            try:
                return chr(int("".join(digits), 16))
            except ValueError:
                raise LexerError(f"Malformed unicode escape '{''.join(digits)}'", line, column) from None
        raise LexerError(f"Unknown escape sequence '\\{char}'", line, column)

    def _emit_number(self) -> None:
        start, line, column = self._pos, self._line, self._column
        if self._peek() in {"-", "+"}:
            self._advance()
        self._consume_digits()
        if self._peek() == "." and self._peek(1).isdigit():
            self._advance()
            self._consume_digits()
        if self._peek() in {"e", "E"} and (
            self._peek(1).isdigit() or (self._peek(1) in {"-", "+"} and self._peek(2).isdigit())
        ):
            self._advance(2)
            self._consume_digits()
        self._add_token(TokenType.NUMBER, float(self.text[start : self._pos]), line, column, start)

    def _consume_digits(self) -> None:
        while not self._is_eof and self._peek().isdigit():
            self._advance()

    def _emit_identifier(self) -> None:
        start, line, column = self._pos, self._line, self._column
        self._advance()
        while not self._is_eof and (self._peek().isalnum() or self._peek() in {"_", "."}):
            self._advance()
        word = self.text[start : self._pos]
        if word in {"true", "false"}:
            self._add_token(TokenType.BOOLEAN, word == "true", line, column, start)
        elif word in KEYWORDS:
            self._add_token(TokenType.KEYWORD, word, line, column, start)
        else:
            self._add_token(TokenType.IDENTIFIER, word, line, column, start)

    @property
    def _is_eof(self) -> bool:
        return self._pos >= len(self.text)

    def _peek(self, ahead: int = 0) -> str:
        index = self._pos + ahead
        if index >= len(self.text):
            return "\0"
        return self.text[index]

    def _advance(self, steps: int = 1) -> str:
        char = ""
        for _ in range(steps):
            char = self.text[self._pos]
            self._pos += 1
            if char == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        return char


__all__ = ["Lexer", "LexerConfig", "LexerError", "Token", "TokenType"]
