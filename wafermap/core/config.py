"""
Configuration and Styling Module.

This module contains the record-format contract, cell geometry, color palette
and artifact naming used throughout the wafer map pipeline. Run-specific
settings (paths, cell size, which maps to render) live in `PipelineConfig`
so that nothing depends on process-wide path constants.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from wafermap.enums import RenderMode

# --- Input Record Contract (pipe-delimited PRR lines) ---
RECORD_PREFIX = "PRR|"
FIELD_DELIMITER = "|"

# Fixed column positions, as written by the upstream converter.
HARD_BIN_FIELD = 5
SOFT_BIN_FIELD = 6
X_COORD_FIELD = 7
Y_COORD_FIELD = 8
PART_ID_FIELD = 10
PART_TXT_FIELD = 11  # Bin source: float text, truncated to int

# Need to reach index 11 (PART_TXT), so at least 12 tokens.
MIN_FIELD_COUNT = PART_TXT_FIELD + 1

# Bin value that classifies a die as PASS.
PASS_BIN = 1
# Bin value used when the bin source cannot be parsed.
DEFAULT_BIN_VALUE = 0

# --- Cell Geometry (pixels) ---
CELL_SIZE = 20
PADDING = 30
# Below this size a 1 px outline would cover the whole cell, so cells are drawn fill-only.
MIN_OUTLINED_CELL_SIZE = 3

# Placeholder canvas used when there is nothing to draw.
EMPTY_MAP_WIDTH = 300
EMPTY_MAP_HEIGHT = 200
EMPTY_MAP_MESSAGE = "No wafer data or data is invalid."

# --- By-Identifier Gradient (HSB) ---
IDENTIFIER_SATURATION = 0.8
IDENTIFIER_BRIGHTNESS = 0.9

# --- Cell Colors ---
PASS_CELL_COLOR = '#2ECC71'     # Vibrant green for BIN=1 dies.
FAIL_CELL_COLOR = '#E74C3C'     # Strong red for every other bin.
NO_DATA_CELL_COLOR = '#C0C0C0'  # Light grey for untested / unused sites.
CELL_OUTLINE_COLOR = '#000000'
CELL_TEXT_COLOR = '#000000'
MAP_BACKGROUND_COLOR = '#FFFFFF'
EMPTY_MESSAGE_COLOR = '#E74C3C'

CELL_LABEL_FONT_SIZE = 8
AXIS_LABEL_FONT_SIZE = 10


# --- Theme Configuration ---
@dataclass
class MapTheme:
    background_color: str = MAP_BACKGROUND_COLOR
    outline_color: str = CELL_OUTLINE_COLOR
    no_data_color: str = NO_DATA_CELL_COLOR
    pass_color: str = PASS_CELL_COLOR
    fail_color: str = FAIL_CELL_COLOR
    text_color: str = CELL_TEXT_COLOR
    message_color: str = EMPTY_MESSAGE_COLOR


DEFAULT_THEME = MapTheme()

# --- Titles ---
MAP_TITLES = {
    RenderMode.IDENTIFIER: "Wafer Map (PART_ID)",
    RenderMode.BIN: "Wafer Map (BIN - For Yield)",
}

# --- Artifacts ---
DEFAULT_INPUT_PATH = "unpacked/output.txt"
DEFAULT_OUTPUT_DIR = "output"
YIELD_SUMMARY_FILENAME = "wafer_yield_summary.txt"
CSV_EXPORT_FILENAME = "converted.csv"
MAP_IMAGE_FILENAMES = {
    RenderMode.IDENTIFIER: "wafer_map_part_id.png",
    RenderMode.BIN: "wafer_map_bin.png",
}

CSV_EXPORT_COLUMNS = ['X_COORD', 'Y_COORD', 'PART_ID', 'HARD_BIN', 'SOFT_BIN', 'PART_TXT']

# --- PNG Export ---
PNG_EXPORT_SCALE = 1


@dataclass
class PipelineConfig:
    """
    Explicit run configuration for the wafer map pipeline.

    Replaces the fixed input/output paths with parameters so the same code
    can run against any dump and write into any directory.
    """
    input_path: Union[str, Path] = DEFAULT_INPUT_PATH
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR
    cell_size: int = CELL_SIZE
    padding: int = PADDING
    modes: List[RenderMode] = field(default_factory=lambda: [RenderMode.IDENTIFIER, RenderMode.BIN])
    export_images: bool = True
    export_csv: bool = True
    theme: MapTheme = field(default_factory=MapTheme)

    def __post_init__(self):
        self.input_path = Path(self.input_path)
        self.output_dir = Path(self.output_dir)
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.padding < 0:
            raise ValueError(f"padding must not be negative, got {self.padding}")
        self.modes = [RenderMode(m) for m in self.modes]

    @property
    def summary_path(self) -> Path:
        return self.output_dir / YIELD_SUMMARY_FILENAME

    @property
    def csv_path(self) -> Path:
        return self.output_dir / CSV_EXPORT_FILENAME

    def image_path(self, mode: RenderMode) -> Path:
        return self.output_dir / MAP_IMAGE_FILENAMES[mode]

# --- Instrumentation Dump (text rendering of PRR records) ---
DUMP_RECORD_HEADER_PATTERN = r"^Record \d+, type=(\w+), \d+ entries:?$"
DUMP_FIELD_PATTERN = r"^\s*(\w+)\s*=\s*(.+?)(?:\s*\(.+?\))?$"
DUMP_PRR_TYPE = "Prr"
DUMP_BLOCK_END_FIELD = "PART_ID"

# Column order of a PRR record; index 0 is the record prefix itself.
PRR_FIELD_ORDER = [
    'HEAD_NUM', 'SITE_NUM', 'PART_FLG', 'NUM_TEST', 'HARD_BIN', 'SOFT_BIN',
    'X_COORD', 'Y_COORD', 'TEST_T', 'PART_ID', 'PART_TXT', 'PART_FIX'
]
