"""Custom exception hierarchy for the csg2xcsg converter."""

from __future__ import annotations


class Csg2XcsgError(Exception):
    """Base exception for all csg2xcsg errors."""


class LexError(Csg2XcsgError):
    """Raised when .csg text cannot be split into statements."""


class StructureError(Csg2XcsgError):
    """Raised when the leveled record stream does not form a tree."""


class ConfigError(Csg2XcsgError):
    """Raised when a tag mapping file cannot be loaded."""


class LiteralError(Csg2XcsgError):
    """Raised when a literal value cannot be converted to the requested type."""


class ConversionError(Csg2XcsgError):
    """Raised when a node cannot be translated to xcsg.

    Carries the .csg line number, the offending tag and the full signature
    so the message can point the user at the source statement.
    """

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        tag: str | None = None,
        signature: str | None = None,
    ) -> None:
        self.line = line
        self.tag = tag
        self.signature = signature
        self.reason = message
        text = message
        if line is not None:
            text = f".csg file line {line}: {text}"
        if signature:
            text = f"{text}: {signature}"
        super().__init__(text)


class UnsupportedConstructError(ConversionError):
    """Raised for OpenSCAD features xcsg has no counterpart for."""


class MissingParameterError(ConversionError):
    """Raised when a required parameter is absent."""


class MalformedParameterError(ConversionError):
    """Raised when a parameter has the wrong shape or type."""


class DomainError(ConversionError):
    """Raised when a numeric parameter is out of its valid range."""


class UnsupportedVariantError(ConversionError):
    """Raised for supported tags used in a way xcsg cannot express."""
