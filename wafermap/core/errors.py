"""
Error taxonomy for wafer record ingestion.

Per-line problems (`ParseError` subclasses) are raised by the parser and
recovered by the ingestion loop. `SourceMissingError` is fatal for a run.
"""
from typing import Optional


class WaferMapError(Exception):
    """Base class for all wafer map errors."""


class ParseError(WaferMapError, ValueError):
    """A record line could not be turned into a die record."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: str = ""):
        super().__init__(message)
        self.line_number = line_number
        self.line = line

    def __str__(self) -> str:
        base = super().__str__()
        if self.line_number is not None:
            return f"Line {self.line_number}: {base}"
        return base


class TruncatedRecordError(ParseError):
    """Too few fields to reach the last positional column."""


class BadCoordinateError(ParseError):
    """X or Y token is not an integer."""


class SourceMissingError(WaferMapError, FileNotFoundError):
    """The input file does not exist."""

    def __init__(self, path):
        super().__init__(f"Input file not found: {path}")
        self.path = path
