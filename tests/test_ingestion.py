import logging
import pytest
from wafermap.core.errors import SourceMissingError
from wafermap.core.models import Bounds
from wafermap.io.ingestion import build_wafer_grid, load_wafer_grid
from wafermap.analytics.yield_analysis import yield_rate

def test_scenario_three_dies(scenario_lines):
    result = build_wafer_grid(scenario_lines)
    grid = result.grid
    assert grid.total_chips == 3
    assert grid.pass_count == 1
    assert grid.bounds() == Bounds(0, 1, 0, 1)
    assert yield_rate(grid) == pytest.approx(33.33, abs=0.01)
    assert result.errors == []
    assert result.records_parsed == 3
    assert result.lines_read == 4

def test_truncated_line_is_skipped(scenario_lines):
    lines = scenario_lines + ["PRR|1|2|3|4"]
    result = build_wafer_grid(lines)
    assert result.grid.total_chips == 3
    assert result.skipped == 1
    assert "Line 5" in result.errors[0]

def test_bad_coordinate_line_is_skipped(make_prr_line, caplog):
    lines = [make_prr_line("x", 0, "1", "1.0"), make_prr_line(2, 3, "2", "1.0")]
    with caplog.at_level(logging.WARNING):
        result = build_wafer_grid(lines)
    assert result.grid.total_chips == 1
    assert result.grid.lookup(2, 3) is not None
    assert len(result.errors) == 1
    assert "Skipping PRR record" in caplog.text

def test_bad_bin_value_keeps_record_with_warning(make_prr_line, caplog):
    with caplog.at_level(logging.WARNING):
        result = build_wafer_grid([make_prr_line(0, 0, "1", "abc")])
    grid = result.grid
    assert grid.total_chips == 1
    assert grid.pass_count == 0
    assert grid.lookup(0, 0).bin_value == 0
    assert result.errors == []
    assert len(result.warnings) == 1
    assert "abc" in caplog.text

def test_repeated_line_counts_twice(make_prr_line):
    line = make_prr_line(4, 4, "9", "1.0")
    result = build_wafer_grid([line, line])
    assert result.grid.total_chips == 2
    assert result.grid.pass_count == 2
    assert len(result.grid) == 1

def test_no_matching_lines_gives_empty_grid():
    result = build_wafer_grid(["FAR|1|4", "MIR|lot", ""])
    assert result.is_empty
    assert result.grid.total_chips == 0
    assert yield_rate(result.grid) == 0.0

def test_load_wafer_grid_from_file(tmp_path, scenario_lines):
    path = tmp_path / "output.txt"
    path.write_text("\n".join(scenario_lines) + "\n", encoding="utf-8")
    result = load_wafer_grid(path)
    assert result.grid.total_chips == 3
    assert result.grid.pass_count == 1

def test_load_wafer_grid_missing_file(tmp_path):
    missing = tmp_path / "nope.txt"
    with pytest.raises(SourceMissingError) as exc_info:
        load_wafer_grid(missing)
    assert isinstance(exc_info.value, FileNotFoundError)
    assert str(missing) in str(exc_info.value)
