"""
Enum Definitions Module.

This module contains Enumeration classes for the constant sets of values used
by the wafer map: die outcome, per-coordinate cell status and render mode.
Using enums instead of raw characters keeps the renderers and the text map
on one shared classification.
"""
from enum import Enum

class DieStatus(Enum):
    """Pass/fail outcome of a tested die."""
    PASS = "P"
    FAIL = "F"

class CellStatus(Enum):
    """Classification of a grid coordinate, including sites with no record."""
    PASS = "P"
    FAIL = "F"
    NO_DATA = "."

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_die_status(cls, status: DieStatus) -> "CellStatus":
        return cls(status.value)

class RenderMode(Enum):
    """Enumeration for the two wafer map encodings."""
    IDENTIFIER = "part_id"
    BIN = "bin"

    @classmethod
    def values(cls) -> list[str]:
        """Returns the string values of all enum members."""
        return [item.value for item in cls]
