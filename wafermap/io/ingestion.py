import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Union

from wafermap.core.errors import ParseError, SourceMissingError
from wafermap.core.models import WaferGrid
from wafermap.io.parser import parse_record_line
from wafermap.utils.telemetry import track_performance, PerformanceMonitor

logger = logging.getLogger(__name__)

@dataclass
class LoadResult:
    """
    Result of the record ingestion pass.
    Contains the populated WaferGrid and the per-line errors/warnings that were recovered.
    """
    grid: WaferGrid = field(default_factory=WaferGrid)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    lines_read: int = 0
    records_parsed: int = 0

    @property
    def skipped(self) -> int:
        """Number of PRR lines dropped because of parse errors."""
        return len(self.errors)

    @property
    def is_empty(self) -> bool:
        return self.grid.is_empty


def build_wafer_grid(lines: Iterable[str]) -> LoadResult:
    """
    Streams lines into a new WaferGrid in a single pass.
    Bad lines are logged and collected; they never stop the stream.
    """
    result = LoadResult()

    for line_number, line in enumerate(lines, start=1):
        result.lines_read = line_number
        try:
            parsed = parse_record_line(line, line_number)
        except ParseError as e:
            msg = f"Skipping PRR record: {e}"
            result.errors.append(msg)
            logger.warning(msg)
            continue

        if parsed is None:
            continue

        for warning in parsed.warnings:
            result.warnings.append(warning)
            logger.warning(warning)

        result.grid.insert(parsed.record)
        result.records_parsed += 1

    if result.is_empty:
        logger.warning("No valid PRR records found; wafer grid is empty.")

    return result


@track_performance("Wafer Grid Ingestion")
def load_wafer_grid(input_path: Union[str, Path], encoding: str = "utf-8") -> LoadResult:
    """
    Loads a pipe-delimited record file into a WaferGrid.

    Raises SourceMissingError if the file does not exist; nothing is
    loaded or written in that case.
    """
    path = Path(input_path)
    if not path.is_file():
        logger.error(f"Input file not found: {path}")
        raise SourceMissingError(path)

    with open(path, 'r', encoding=encoding, errors='replace') as f:
        result = build_wafer_grid(f)

    PerformanceMonitor.log_event(
        f"Parsed ({path.name})",
        0.0,
        details=(
            f"{result.records_parsed} records, {len(result.errors)} skipped, "
            f"{len(result.warnings)} warnings"
        )
    )
    logger.info(
        f"Loaded {result.grid.total_chips} dies from '{path}' "
        f"({result.grid.pass_count} pass, {len(result.errors)} lines skipped)."
    )
    return result
