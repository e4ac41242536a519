"""
Wafer Map Renderer.

Walks every coordinate of the grid's inclusive bounding box, including sites
with no record, and paints one square cell per coordinate into an RGBA
pixel buffer. Text (axis labels, identifier overlays) is emitted alongside
the buffer as positioned labels for the figure layer to draw.
"""
from dataclasses import dataclass, field
import logging
from typing import List, Optional, Tuple

import numpy as np

from wafermap.core.config import (
    CELL_SIZE, PADDING, MIN_OUTLINED_CELL_SIZE, EMPTY_MAP_WIDTH, EMPTY_MAP_HEIGHT, EMPTY_MAP_MESSAGE,
    MAP_TITLES, MapTheme, DEFAULT_THEME
)
from wafermap.core.models import WaferGrid, Bounds, EMPTY_BOUNDS
from wafermap.enums import RenderMode
from wafermap.plotting.colors import ColorScheme, RGBA, hex_to_rgba, color_scheme_for
from wafermap.utils.telemetry import track_performance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextLabel:
    """Text anchored at its center, in pixel coordinates of the buffer."""
    text: str
    x: float
    y: float


@dataclass
class RenderView:
    pixels: np.ndarray
    mode: RenderMode
    title: str
    bounds: Bounds = EMPTY_BOUNDS
    cell_size: int = CELL_SIZE
    padding: int = PADDING
    x_labels: List[TextLabel] = field(default_factory=list)
    y_labels: List[TextLabel] = field(default_factory=list)
    cell_labels: List[TextLabel] = field(default_factory=list)
    is_empty: bool = False
    message: Optional[TextLabel] = None

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    def cell_origin(self, x: int, y: int) -> Tuple[int, int]:
        """(left, top) pixel of the cell at die coordinate (x, y)."""
        return cell_origin(self.bounds, x, y, self.cell_size, self.padding)

    def cell_pixel(self, x: int, y: int) -> RGBA:
        """Fill color at the center of the cell at (x, y)."""
        if self.is_empty:
            raise ValueError("Empty render has no cells.")
        left, top = self.cell_origin(x, y)
        half = (self.cell_size - 1) // 2
        return tuple(int(c) for c in self.pixels[top + half, left + half])


def cell_origin(bounds: Bounds, x: int, y: int, cell_size: int, padding: int) -> Tuple[int, int]:
    # Raster rows grow downward while die Y grows upward.
    left = padding + (x - bounds.min_x) * cell_size
    top = padding + (bounds.max_y - y) * cell_size
    return left, top


def _new_canvas(width: int, height: int, color: RGBA) -> np.ndarray:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def _paint_cell(pixels: np.ndarray, left: int, top: int, size: int, fill: RGBA, outline: RGBA) -> None:
    block = pixels[top:top + size, left:left + size]
    block[:, :] = fill
    if size < MIN_OUTLINED_CELL_SIZE:
        return
    block[0, :] = outline
    block[-1, :] = outline
    block[:, 0] = outline
    block[:, -1] = outline


def render_placeholder(mode: RenderMode, theme: MapTheme = DEFAULT_THEME, padding: int = PADDING) -> RenderView:
    """The explicit 'no data' view returned for an empty grid."""
    pixels = _new_canvas(EMPTY_MAP_WIDTH, EMPTY_MAP_HEIGHT, hex_to_rgba(theme.background_color))
    return RenderView(
        pixels=pixels,
        mode=mode,
        title=MAP_TITLES[mode],
        padding=padding,
        is_empty=True,
        message=TextLabel(EMPTY_MAP_MESSAGE, EMPTY_MAP_WIDTH / 2, padding),
    )


@track_performance("Wafer Map Render")
def render_wafer_map(
    grid: WaferGrid,
    scheme: ColorScheme,
    cell_size: int = CELL_SIZE,
    padding: int = PADDING,
    theme: MapTheme = DEFAULT_THEME
) -> RenderView:
    """
    Renders the grid with the given color scheme.

    Returns the placeholder view when the grid is empty, since its bounds
    are an inverted sentinel range.
    """
    if grid.is_empty:
        logger.info(f"Rendering placeholder for empty grid ({scheme.mode.value}).")
        return render_placeholder(scheme.mode, theme, padding)

    bounds = grid.bounds()
    width = bounds.width * cell_size + 2 * padding
    height = bounds.height * cell_size + 2 * padding
    pixels = _new_canvas(width, height, hex_to_rgba(theme.background_color))

    view = RenderView(
        pixels=pixels,
        mode=scheme.mode,
        title=MAP_TITLES[scheme.mode],
        bounds=bounds,
        cell_size=cell_size,
        padding=padding,
    )
    center = cell_size / 2

    for y in bounds.y_range_descending():
        for x in bounds.x_range():
            left, top = cell_origin(bounds, x, y, cell_size, padding)
            record = grid.lookup(x, y)
            _paint_cell(pixels, left, top, cell_size, scheme.cell_color(record), scheme.outline_color)

            if record is not None and scheme.label_cells:
                view.cell_labels.append(TextLabel(record.identifier, left + center, top + center))

    for x in bounds.x_range():
        left, _ = cell_origin(bounds, x, bounds.max_y, cell_size, padding)
        view.x_labels.append(TextLabel(str(x), left + center, padding / 2))

    for y in bounds.y_range_descending():
        _, top = cell_origin(bounds, bounds.min_x, y, cell_size, padding)
        view.y_labels.append(TextLabel(str(y), padding / 2, top + center))

    return view


def render_mode(
    grid: WaferGrid,
    mode: RenderMode,
    cell_size: int = CELL_SIZE,
    padding: int = PADDING,
    theme: MapTheme = DEFAULT_THEME
) -> RenderView:
    """Renders the grid in one of the two map modes."""
    scheme = color_scheme_for(mode, grid, theme)
    return render_wafer_map(grid, scheme, cell_size, padding, theme)
