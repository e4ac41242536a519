"""
Text Reporting Module.

Produces the console P/F/. wafer map and the three-line yield summary
artifact. The character map uses the same CellStatus classification as the
by-bin image, so the two always agree on every coordinate.
"""
import logging
from pathlib import Path
from typing import List, Union

from wafermap.analytics.yield_analysis import summarize_yield, YieldSummary
from wafermap.core.models import WaferGrid

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "No wafer data or data is invalid."
TEXT_MAP_LEGEND = "P: Pass, F: Fail, .: No Data"

# ==============================================================================
# --- Console Wafer Map ---
# ==============================================================================

def text_map_rows(grid: WaferGrid) -> List[List[str]]:
    """Status symbols row by row, top row (max Y) first."""
    if grid.is_empty:
        return []
    bounds = grid.bounds()
    return [
        [grid.cell_status(x, y).symbol for x in bounds.x_range()]
        for y in bounds.y_range_descending()
    ]

def format_text_map(grid: WaferGrid) -> str:
    """
    Renders the grid as a character map with coordinate labels:

        Wafer range: X [0,1], Y [0,1]
                  0   1
           1      F   .
           0      P   F
    """
    if grid.is_empty:
        return NO_DATA_TEXT

    bounds = grid.bounds()
    lines = [f"Wafer range: X [{bounds.min_x},{bounds.max_x}], Y [{bounds.min_y},{bounds.max_y}]"]
    lines.append(" " * 7 + "".join(f"{x:4d}" for x in bounds.x_range()))

    for y, row in zip(bounds.y_range_descending(), text_map_rows(grid)):
        lines.append(f"{y:4d}   " + "".join(f"{symbol:>4}" for symbol in row))

    return "\n".join(lines)

# ==============================================================================
# --- Yield Summary ---
# ==============================================================================

def format_yield_summary(summary: YieldSummary) -> str:
    return (
        f"Total Chips: {summary.total_chips}\n"
        f"PASS (BIN=1): {summary.pass_count}\n"
        f"Yield Rate: {summary.yield_rate:.2f}%\n"
    )

def write_yield_summary(grid: WaferGrid, summary_path: Union[str, Path]) -> Path:
    """Writes the yield summary artifact, creating the parent directory if needed."""
    path = Path(summary_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(format_yield_summary(summarize_yield(grid)))
    logger.info(f"Yield summary written to: {path}")
    return path
