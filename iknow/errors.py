"""Exceptions surfaced by the iknow pipeline."""

from __future__ import annotations


class IknowError(Exception):
    pass


class ConversionError(IknowError):
    """The event stream could not be converted into a value tree.

    Carries no detail about which node failed.
    """

    def __init__(self, message: str = "could not convert meta data"):
        super().__init__(message)
        self.message = message


class SourceError(IknowError):
    def __init__(self, path: str, cause: object):
        super().__init__(f"Could not open `{path}`, {cause}")
        self.path = path
        self.cause = cause


class NotationSyntaxError(IknowError):
    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"Error: {message} at {line}:{column}")
        self.line = line
        self.column = column


__all__ = ["IknowError", "ConversionError", "SourceError", "NotationSyntaxError"]
