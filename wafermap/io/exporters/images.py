"""
Map Image Export.
Writes rendered wafer maps to PNG through Plotly's static image export (kaleido).
"""
import logging
from pathlib import Path
from typing import Union

from wafermap.core.config import PNG_EXPORT_SCALE, MapTheme, DEFAULT_THEME
from wafermap.plotting.renderers.figures import create_wafer_map_figure
from wafermap.plotting.renderers.maps import RenderView

logger = logging.getLogger(__name__)


def map_png_bytes(view: RenderView, theme: MapTheme = DEFAULT_THEME, scale: float = PNG_EXPORT_SCALE) -> bytes:
    """PNG bytes of the view at the buffer's own dimensions (no title band)."""
    fig = create_wafer_map_figure(view, theme=theme, show_title=False)
    return fig.to_image(format="png", engine="kaleido", scale=scale, width=view.width, height=view.height)


def export_map_png(
    view: RenderView,
    image_path: Union[str, Path],
    theme: MapTheme = DEFAULT_THEME,
    scale: float = PNG_EXPORT_SCALE
) -> Path:
    """
    Writes the view to `image_path`, creating the parent directory.
    Export and write failures propagate to the caller.
    """
    path = Path(image_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    img_bytes = map_png_bytes(view, theme=theme, scale=scale)
    with open(path, 'wb') as f:
        f.write(img_bytes)
    logger.info(f"Map image saved to: {path} ({view.width}x{view.height})")
    return path
