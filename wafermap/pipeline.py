"""
Batch Pipeline.

Loads a record file, prints the console map, and writes the yield summary,
CSV export and one map image per render mode into the output directory.
"""
import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from wafermap.analytics.yield_analysis import summarize_yield, YieldSummary
from wafermap.core.config import PipelineConfig, DEFAULT_INPUT_PATH, DEFAULT_OUTPUT_DIR, CELL_SIZE, PADDING
from wafermap.core.errors import SourceMissingError
from wafermap.core.models import WaferGrid
from wafermap.enums import RenderMode
from wafermap.io.exporters.csv_export import export_grid_csv
from wafermap.io.exporters.images import export_map_png
from wafermap.io.ingestion import load_wafer_grid, LoadResult
from wafermap.plotting.renderers.maps import RenderView, render_mode
from wafermap.reporting import format_text_map, write_yield_summary, TEXT_MAP_LEGEND
from wafermap.utils.logger import configure_logging

logger = logging.getLogger(__name__)

@dataclass
class PipelineResult:
    load: LoadResult
    summary: YieldSummary
    views: Dict[RenderMode, RenderView] = field(default_factory=dict)
    artifacts: List[Path] = field(default_factory=list)

    @property
    def grid(self) -> WaferGrid:
        return self.load.grid

def run_pipeline(config: PipelineConfig) -> PipelineResult:
    """
    Runs one load-render-export pass.

    A missing input raises SourceMissingError before anything is written.
    Failures while writing artifacts propagate.
    """
    load = load_wafer_grid(config.input_path)
    grid = load.grid

    config.output_dir.mkdir(parents=True, exist_ok=True)

    result = PipelineResult(load=load, summary=summarize_yield(grid))
    result.artifacts.append(write_yield_summary(grid, config.summary_path))

    if config.export_csv:
        result.artifacts.append(export_grid_csv(grid, config.csv_path))

    for mode in config.modes:
        view = render_mode(grid, mode, config.cell_size, config.padding, config.theme)
        result.views[mode] = view
        if config.export_images:
            result.artifacts.append(export_map_png(view, config.image_path(mode), theme=config.theme))

    return result

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate wafer maps and yield summary from PRR records.")
    parser.add_argument("input_path", nargs="?", default=DEFAULT_INPUT_PATH, help="Pipe-delimited PRR record file.")
    parser.add_argument("-o", "--output-dir", default=DEFAULT_OUTPUT_DIR, help="Directory for generated artifacts.")
    parser.add_argument("--cell-size", type=int, default=CELL_SIZE, help="Die cell size in pixels.")
    parser.add_argument("--padding", type=int, default=PADDING, help="Map margin in pixels.")
    parser.add_argument("--mode", choices=RenderMode.values(), action="append", dest="modes",
                        help="Render mode (repeatable). Defaults to both.")
    parser.add_argument("--no-images", action="store_true", help="Skip PNG export.")
    parser.add_argument("--no-csv", action="store_true", help="Skip CSV export.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = PipelineConfig(
        input_path=args.input_path,
        output_dir=args.output_dir,
        cell_size=args.cell_size,
        padding=args.padding,
        modes=args.modes or RenderMode.values(),
        export_images=not args.no_images,
        export_csv=not args.no_csv,
    )

    try:
        result = run_pipeline(config)
    except SourceMissingError as e:
        logger.error(f"{e}. Run `wafermap-convert --format records` first to produce it.")
        return 1
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    print(f"\n--- Wafer Map ({TEXT_MAP_LEGEND}) ---")
    print(format_text_map(result.grid))
    print()
    print(f"Total Chips: {result.summary.total_chips}")
    print(f"PASS (BIN=1): {result.summary.pass_count}")
    print(f"Yield Rate: {result.summary.yield_rate:.2f}%")
    for path in result.artifacts:
        print(f"Wrote: {path}")
    return 0

if __name__ == '__main__':
    sys.exit(main())
