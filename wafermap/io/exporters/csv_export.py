"""
CSV Export.
Writes per-die results with the `X_COORD,Y_COORD,PART_ID,HARD_BIN,SOFT_BIN,PART_TXT` header.
"""
import io
import logging
from pathlib import Path
from typing import TextIO, Union

import pandas as pd

from wafermap.core.config import CSV_EXPORT_COLUMNS
from wafermap.core.models import WaferGrid

logger = logging.getLogger(__name__)


def _prepare_export_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Coordinates become bare ints (blank when missing); every other column is text."""
    out = df[CSV_EXPORT_COLUMNS].copy()
    for col in ['X_COORD', 'Y_COORD']:
        numeric = pd.to_numeric(out[col], errors='coerce')
        out[col] = pd.Series(
            [int(v) if pd.notna(v) else "" for v in numeric], index=out.index, dtype=object
        )
    for col in ['PART_ID', 'HARD_BIN', 'SOFT_BIN', 'PART_TXT']:
        out[col] = out[col].fillna("").astype(str)
    return out


def _format_row(row) -> str:
    # Only PART_TXT is quoted: X,Y,PART_ID,HARD_BIN,SOFT_BIN,"PART_TXT"
    return f'{row.X_COORD},{row.Y_COORD},{row.PART_ID},{row.HARD_BIN},{row.SOFT_BIN},"{row.PART_TXT}"'


def _write_frame(df: pd.DataFrame, handle: TextIO) -> None:
    handle.write(",".join(CSV_EXPORT_COLUMNS) + "\n")
    for row in _prepare_export_frame(df).itertuples(index=False):
        handle.write(_format_row(row) + "\n")


def write_csv(df: pd.DataFrame, csv_path: Union[str, Path]) -> Path:
    """Writes the export columns of `df` to `csv_path`, creating the parent directory."""
    path = Path(csv_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        _write_frame(df, f)
    return path


def export_grid_csv(grid: WaferGrid, csv_path: Union[str, Path]) -> Path:
    """Exports every live die record of the grid, top row first."""
    df = grid.to_dataframe()
    path = write_csv(df, csv_path)
    logger.info(f"Exported {len(df)} die records to '{path}'.")
    return path


def grid_to_csv_bytes(grid: WaferGrid) -> bytes:
    """CSV export as bytes, for download buttons."""
    buffer = io.StringIO()
    _write_frame(grid.to_dataframe(), buffer)
    return buffer.getvalue().encode('utf-8')
