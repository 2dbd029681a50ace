"""iknow: a self-describing knowledge format.

The root format is able to describe other formats, including itself (see
``assets/self_root.txt`` and ``root_self``).
"""

from .nodes import (
    Avatar,
    BoolLit,
    Enum,
    Instance,
    InstanceTy,
    Node,
    NumLit,
    StrLit,
    Struct,
    Tup,
    TypeRef,
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
from .errors import ConversionError, IknowError, NotationSyntaxError, SourceError
from .lexer import Lexer, LexerError
from .parser import MetaParser, ParseError
from .converter import TreeConverter
from .formatter import CanonicalFormatter, render
from .parser_manager import ParserManager, convert_document, convert_file
from .document import join_format_data, join_values
from .schemas import root_self

__version__ = "0.1.0"
__all__ = [
    "Avatar",
    "BoolLit",
    "Enum",
    "Instance",
    "InstanceTy",
    "Node",
    "NumLit",
    "StrLit",
    "Struct",
    "Tup",
    "TypeRef",
    "Value",
    "ty_arc",
    "ty_bool",
    "ty_box",
    "ty_f64",
    "ty_option",
    "ty_self",
    "ty_string",
    "ty_usize",
    "ty_vec",
    "ConversionError",
    "IknowError",
    "NotationSyntaxError",
    "SourceError",
    "Lexer",
    "LexerError",
    "MetaParser",
    "ParseError",
    "TreeConverter",
    "CanonicalFormatter",
    "render",
    "ParserManager",
    "convert_document",
    "convert_file",
    "join_format_data",
    "join_values",
    "root_self",
]
