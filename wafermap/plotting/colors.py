"""
Color Schemes for the wafer map.

A ColorScheme is plain data: the render mode, a function that maps a die
record to an RGBA color, and the fixed colors for empty sites and cell
outlines. The renderer walks the grid the same way for every mode and only
asks the scheme which color to paint.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import matplotlib.colors as mcolors

from wafermap.core.config import (
    MapTheme, DEFAULT_THEME, IDENTIFIER_SATURATION, IDENTIFIER_BRIGHTNESS
)
from wafermap.core.models import DieRecord, WaferGrid
from wafermap.enums import DieStatus, CellStatus, RenderMode

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


def hex_to_rgba(hex_color: str, alpha: int = 255) -> RGBA:
    """Converts a hex color string to an 8-bit RGBA tuple."""
    r, g, b, _ = mcolors.to_rgba(hex_color)
    return (round(r * 255), round(g * 255), round(b * 255), alpha)


def rgba_to_hex(color: RGBA) -> str:
    return mcolors.to_hex([c / 255 for c in color[:3]])


def identifier_value(identifier: str) -> Optional[float]:
    """Numeric value of a die identifier, or None when it is not a finite number."""
    try:
        value = float(identifier)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def identifier_hue(value: float, total_chips: int) -> float:
    """Hue in [0, 1): identifier magnitude over population size, wrapped around the color wheel."""
    return (value / (total_chips + 1)) % 1.0


def hsb_to_rgba(hue: float, saturation: float = IDENTIFIER_SATURATION,
                brightness: float = IDENTIFIER_BRIGHTNESS) -> RGBA:
    r, g, b = mcolors.hsv_to_rgb((hue, saturation, brightness))
    return (round(r * 255), round(g * 255), round(b * 255), 255)


@dataclass(frozen=True)
class ColorScheme:
    mode: RenderMode
    color_for: Callable[[DieRecord], RGBA]
    no_data_color: RGBA
    outline_color: RGBA
    label_cells: bool = False

    def cell_color(self, record: Optional[DieRecord]) -> RGBA:
        if record is None:
            return self.no_data_color
        return self.color_for(record)


def identifier_color_scheme(total_chips: int, theme: MapTheme = DEFAULT_THEME) -> ColorScheme:
    """
    Continuous hue gradient keyed on the identifier's numeric value.
    Dies with equal identifier values share a hue. Non-numeric identifiers
    fall back to hue 0.
    """
    def color_for(record: DieRecord) -> RGBA:
        value = identifier_value(record.identifier)
        if value is None:
            logger.debug(f"Non-numeric identifier {record.identifier!r} at ({record.x}, {record.y}).")
            value = 0.0
        return hsb_to_rgba(identifier_hue(value, total_chips))

    return ColorScheme(
        mode=RenderMode.IDENTIFIER,
        color_for=color_for,
        no_data_color=hex_to_rgba(theme.no_data_color),
        outline_color=hex_to_rgba(theme.outline_color),
        label_cells=True,
    )


def bin_color_scheme(theme: MapTheme = DEFAULT_THEME) -> ColorScheme:
    """Categorical pass / fail / no-data palette."""
    palette = {
        DieStatus.PASS: hex_to_rgba(theme.pass_color),
        DieStatus.FAIL: hex_to_rgba(theme.fail_color),
    }

    def color_for(record: DieRecord) -> RGBA:
        return palette[record.status]

    return ColorScheme(
        mode=RenderMode.BIN,
        color_for=color_for,
        no_data_color=hex_to_rgba(theme.no_data_color),
        outline_color=hex_to_rgba(theme.outline_color),
        label_cells=False,
    )


def color_scheme_for(mode: RenderMode, grid: WaferGrid, theme: MapTheme = DEFAULT_THEME) -> ColorScheme:
    if mode is RenderMode.IDENTIFIER:
        return identifier_color_scheme(grid.total_chips, theme)
    return bin_color_scheme(theme)


def bin_legend(theme: MapTheme = DEFAULT_THEME) -> List[Tuple[CellStatus, str, str]]:
    """(status, label, hex color) entries for the by-bin map legend."""
    return [
        (CellStatus.PASS, "Pass (BIN=1)", theme.pass_color),
        (CellStatus.FAIL, "Fail", theme.fail_color),
        (CellStatus.NO_DATA, "No Data", theme.no_data_color),
    ]
