"""Recursive-descent parser that turns notation tokens into meta events.

The parser does not build values. It describes what it recognized as a flat
stream of named node boundaries and fields (see ``iknow.meta``), which the
tree converter then interprets. Node names used here:

``expr``, ``variant``, ``field``, ``item``, ``a``, ``b``, ``ty``, ``data``
    slots that hold one expression
``enum``, ``struct``, ``tup``, ``ava``, ``ty``, ``enum_var``, ``ins``
    shapes
"""

from collections import defaultdict
from typing import Any, Callable, List, NotRequired, Optional, TypedDict

from iknow.errors import NotationSyntaxError
from iknow.lexer import Token, TokenType
from iknow.logger import Logger
from iknow.meta import MetaEvent, MetaKind, Range
from iknow.utils import resolve_config

BUILTIN_FLAGS = {
    "Self": "self",
    "String": "string",
    "usize": "usize",
    "f64": "f64",
    "bool": "bool",
    "Arc": "arc",
    "Box": "box",
    "Option": "opt",
    "Vec": "vec",
}

OPENING = {"(", "{", "<"}
CLOSING = {")", "}", ">"}


class ParseError(NotationSyntaxError):
    def __init__(self, message: str, token: Token):
        super().__init__(message, token.line, token.column)
        self.token = token


class ParserConfig(TypedDict):
    emit_comments: NotRequired[bool]
    enable_logger: NotRequired[bool]


class ParserConfigRequired(TypedDict):
    emit_comments: bool
    enable_logger: bool


DEFAULT_CONFIG: ParserConfigRequired = {"emit_comments": True, "enable_logger": True}


class MetaParser:
    def __init__(self, tokens: List[Token], config: Optional[ParserConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "iknow.parser", "is_enabled": self.config["enable_logger"]}).logger
        self.tokens: List[Token] = []
        # comments are keyed by the index of the significant token they follow
        self.comments_after: defaultdict[int, List[Token]] = defaultdict(list)
        for token in tokens:
            if token.type == TokenType.COMMENT:
                self.comments_after[len(self.tokens) - 1].append(token)
            else:
                self.tokens.append(token)
        self.position = 0
        self.events: List[MetaEvent] = []

    @property
    def prev_token(self) -> Token:
        return self.lookahead(-1)

    @property
    def current_token(self) -> Token:
        return self.lookahead(0)

    def lookahead(self, distance: int = 1) -> Token:
        if 0 <= self.position + distance < len(self.tokens):
            return self.tokens[self.position + distance]
        last = self.tokens[-1] if self.tokens else None
        line, column = (last.line, last.column) if last else (1, 1)
        offset = last.offset + last.length if last else 0
        return Token(TokenType.EOF, None, line, column, offset, 0)

    def advance(self) -> None:
        self._flush_comments(self.position)
        self.position = min(self.position + 1, len(self.tokens))

    def at(self, expected_type: TokenType, expected_value: Optional[Any] = None, distance: int = 0) -> bool:
        token = self.lookahead(distance)
        return token.type == expected_type and (expected_value is None or token.value == expected_value)

    def expect(self, expected_type: TokenType | List[TokenType], expected_value: Optional[Any] = None):
        if not isinstance(expected_type, list):
            expected_type = [expected_type]
        if self.current_token.type not in expected_type:
            raise ParseError(
                f"Expected token type {[t.name for t in expected_type]}, but got {self.current_token.type.name}",
                self.current_token,
            )
        elif expected_value is not None and self.current_token.value != expected_value:
            raise ParseError(
                f"Expected '{expected_value}', but got '{self.current_token.value}'",
                self.current_token,
            )

    def consume(self, expected_type: TokenType | List[TokenType], expected_value: Optional[Any] = None) -> Token:
        current_token = self.current_token
        self.expect(expected_type=expected_type, expected_value=expected_value)
        self.advance()
        self.logger.debug(f"Consumed token {current_token}")
        return current_token

    # Events ------------------------------------------------------------------
    def _emit(self, kind: MetaKind, name: str, value, token: Token) -> None:
        self.events.append(MetaEvent(kind, name, value, Range(token.offset, token.length)))

    def _start(self, name: str, token: Token) -> None:
        self._emit(MetaKind.START_NODE, name, None, token)

    def _end(self, name: str, token: Token) -> None:
        self._emit(MetaKind.END_NODE, name, None, token)

    def _slot(self, name: str, parse: Callable[[], None]) -> None:
        self._start(name, self.current_token)
        parse()
        self._end(name, self.prev_token)

    def _flush_comments(self, index: int) -> None:
        comments = self.comments_after.pop(index, [])
        if self.config["emit_comments"]:
            for comment in comments:
                self._emit(MetaKind.STRING, "comment", comment.value, comment)

    # Grammar -----------------------------------------------------------------
    def parse_document(self) -> List[MetaEvent]:
        self.logger.info("Parsing document")
        self.events = []
        self._start("expr", self.current_token)
        self._flush_comments(-1)
        self._parse_expr()
        self.expect(TokenType.EOF)
        self._end("expr", self.current_token)
        self.logger.info(f"Parsed document into {len(self.events)} meta events")
        return self.events

    def _parse_expr(self) -> None:
        token = self.current_token
        if token.type == TokenType.KEYWORD and token.value == "enum":
            self._parse_enum()
        elif token.type == TokenType.KEYWORD and token.value == "struct":
            self._parse_struct()
        elif self.at(TokenType.PUNCTUATION, "("):
            if self.at(TokenType.KEYWORD, "ins", distance=1):
                self._parse_ins()
            else:
                self._parse_tup()
        elif token.type == TokenType.IDENTIFIER:
            self._parse_path()
        elif token.type == TokenType.STRING:
            self._emit(MetaKind.STRING, "str", self.consume(TokenType.STRING).value, token)
        elif token.type == TokenType.NUMBER:
            self._emit(MetaKind.F64, "num", self.consume(TokenType.NUMBER).value, token)
        elif token.type == TokenType.BOOLEAN:
            self._emit(MetaKind.BOOL, "boolean", self.consume(TokenType.BOOLEAN).value, token)
        else:
            raise ParseError(f"Expected an expression, but got {token.type.name} {token.value!r}", token)

    def _parse_enum(self) -> None:
        self._start("enum", self.current_token)
        self.consume(TokenType.KEYWORD, "enum")
        self._parse_head()
        self.consume(TokenType.PUNCTUATION, "{")
        self._parse_items("}", self._parse_variant)
        self._end("enum", self.consume(TokenType.PUNCTUATION, "}"))

    def _parse_struct(self) -> None:
        self._start("struct", self.current_token)
        self.consume(TokenType.KEYWORD, "struct")
        self._parse_head()
        self._parse_fields()
        self._end("struct", self.prev_token)

    def _parse_head(self) -> None:
        name = self.current_token
        if not self.at(TokenType.PUNCTUATION, "<", distance=1):
            self._emit(MetaKind.STRING, "name", self.consume(TokenType.IDENTIFIER).value, name)
            return
        self._start("ava", name)
        self._emit(MetaKind.STRING, "a", self.consume(TokenType.IDENTIFIER).value, name)
        self._slot("b", lambda: self._parse_arguments("<", ">"))
        self._end("ava", self.prev_token)

    def _parse_variant(self) -> None:
        name = self.current_token
        self.expect(TokenType.IDENTIFIER)
        if self.at(TokenType.PUNCTUATION, "(", distance=1):
            self._start("variant", name)
            self._parse_named_payload()
            self._end("variant", self.prev_token)
        elif self.at(TokenType.PUNCTUATION, "{", distance=1):
            self._start("variant", name)
            self._start("struct", name)
            self._emit(MetaKind.STRING, "name", self.consume(TokenType.IDENTIFIER).value, name)
            self._parse_fields()
            self._end("struct", self.prev_token)
            self._end("variant", self.prev_token)
        else:
            self._emit(MetaKind.STRING, "item", self.consume(TokenType.IDENTIFIER).value, name)

    def _parse_named_payload(self) -> None:
        """``Name(A, ..)`` as an avatar of the name string and its payload."""
        name = self.current_token
        self._start("ava", name)
        self._emit(MetaKind.STRING, "a", self.consume(TokenType.IDENTIFIER).value, name)
        self._slot("b", lambda: self._parse_arguments("(", ")"))
        self._end("ava", self.prev_token)

    def _parse_fields(self) -> None:
        self.consume(TokenType.PUNCTUATION, "{")
        self._parse_items("}", self._parse_field)
        self.consume(TokenType.PUNCTUATION, "}")

    def _parse_field(self) -> None:
        name = self.current_token
        self._start("field", name)
        self._start("tup", name)
        self._emit(MetaKind.STRING, "item", self.consume([TokenType.IDENTIFIER, TokenType.KEYWORD]).value, name)
        self.consume(TokenType.PUNCTUATION, ":")
        self._slot("item", self._parse_expr)
        self._end("tup", self.prev_token)
        self._end("field", self.prev_token)

    def _parse_tup(self) -> None:
        self._start("tup", self.current_token)
        self.consume(TokenType.PUNCTUATION, "(")
        self._parse_items(")", self._parse_tuple_item)
        self._end("tup", self.consume(TokenType.PUNCTUATION, ")"))

    def _parse_tuple_item(self) -> None:
        token = self.current_token
        if token.type == TokenType.STRING:
            self._emit(MetaKind.STRING, "item", self.consume(TokenType.STRING).value, token)
        else:
            self._slot("item", self._parse_expr)

    def _parse_ins(self) -> None:
        self._start("ins", self.current_token)
        self.consume(TokenType.PUNCTUATION, "(")
        self.consume(TokenType.KEYWORD, "ins")
        token = self.current_token
        if token.type == TokenType.NUMBER:
            self._emit(MetaKind.F64, "class", self.consume(TokenType.NUMBER).value, token)
        else:
            self._slot("ty", self._parse_expr)
        if not self.at(TokenType.PUNCTUATION, ")"):
            self._slot("data", self._parse_expr)
        self._end("ins", self.consume(TokenType.PUNCTUATION, ")"))

    def _parse_path(self) -> None:
        if self.at(TokenType.PUNCTUATION, "<", distance=1):
            self._start("ava", self.current_token)
            self._slot("a", self._parse_type_name)
            self._slot("b", lambda: self._parse_arguments("<", ">"))
            self._end("ava", self.prev_token)
        elif self.at(TokenType.PUNCTUATION, "::", distance=1):
            self._parse_enum_var()
        else:
            self._parse_type_name()

    def _parse_type_name(self) -> None:
        token = self.consume(TokenType.IDENTIFIER)
        if token.value in BUILTIN_FLAGS:
            self._emit(MetaKind.BOOL, BUILTIN_FLAGS[token.value], True, token)
            return
        self._start("ty", token)
        self._emit(MetaKind.STRING, "name", token.value, token)
        self._end("ty", token)

    def _parse_enum_var(self) -> None:
        ty = self.current_token
        self._start("enum_var", ty)
        self._emit(MetaKind.STRING, "ty", self.consume(TokenType.IDENTIFIER).value, ty)
        self.consume(TokenType.PUNCTUATION, "::")
        variant = self.current_token
        self.expect(TokenType.IDENTIFIER)
        if self.at(TokenType.PUNCTUATION, "(", distance=1):
            self._slot("data", self._parse_named_payload)
        else:
            self._emit(MetaKind.STRING, "data", self.consume(TokenType.IDENTIFIER).value, variant)
        self._end("enum_var", self.prev_token)

    def _parse_arguments(self, opening: str, closing: str) -> None:
        """One argument is emitted as is, several are grouped into a tuple."""
        grouped = self._count_arguments() != 1
        if grouped:
            self._start("tup", self.current_token)
        self.consume(TokenType.PUNCTUATION, opening)
        count = self._parse_items(closing, self._parse_tuple_item if grouped else self._parse_expr)
        if count == 0:
            raise ParseError(f"Expected at least one argument before '{closing}'", self.current_token)
        self.consume(TokenType.PUNCTUATION, closing)
        if grouped:
            self._end("tup", self.prev_token)

    def _parse_items(self, closing: str, parse_item: Callable[[], None]) -> int:
        count = 0
        while not self.at(TokenType.PUNCTUATION, closing):
            parse_item()
            count += 1
            if not self.at(TokenType.PUNCTUATION, ","):
                break
            self.consume(TokenType.PUNCTUATION, ",")
        return count

    def _count_arguments(self) -> int:
        """Top-level items between the current opening bracket and its match."""
        depth = 0
        count = 0
        pending = False
        for token in self.tokens[self.position :]:
            if token.type == TokenType.EOF:
                break
            if token.type == TokenType.PUNCTUATION and token.value in OPENING:
                depth += 1
                if depth == 1:
                    continue
            elif token.type == TokenType.PUNCTUATION and token.value in CLOSING:
                depth -= 1
                if depth == 0:
                    return count + int(pending)
            elif depth == 1 and token.type == TokenType.PUNCTUATION and token.value == ",":
                count += 1
                pending = False
                continue
            pending = True
        raise ParseError("Unbalanced brackets", self.current_token)


__all__ = ["MetaParser", "ParserConfig", "ParseError", "BUILTIN_FLAGS"]
