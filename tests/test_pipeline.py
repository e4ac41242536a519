import plotly.graph_objects as go
import pytest
from wafermap.core.config import PipelineConfig
from wafermap.core.errors import SourceMissingError
from wafermap.enums import RenderMode
from wafermap import pipeline

@pytest.fixture
def record_file(tmp_path, scenario_lines):
    path = tmp_path / "unpacked" / "output.txt"
    path.parent.mkdir()
    path.write_text("\n".join(scenario_lines) + "\n", encoding="utf-8")
    return path

@pytest.fixture
def fake_png(monkeypatch):
    monkeypatch.setattr(go.Figure, "to_image", lambda self, *args, **kwargs: b"PNG")

def test_run_pipeline_writes_all_artifacts(tmp_path, record_file, fake_png):
    config = PipelineConfig(input_path=record_file, output_dir=tmp_path / "output")
    result = pipeline.run_pipeline(config)

    assert result.grid.total_chips == 3
    assert result.summary.pass_count == 1
    assert set(result.views) == {RenderMode.IDENTIFIER, RenderMode.BIN}

    names = sorted(p.name for p in result.artifacts)
    assert names == sorted([
        "wafer_yield_summary.txt", "converted.csv", "wafer_map_part_id.png", "wafer_map_bin.png"
    ])
    summary = (tmp_path / "output" / "wafer_yield_summary.txt").read_text(encoding="utf-8")
    assert "Yield Rate: 33.33%" in summary

def test_run_pipeline_without_images(tmp_path, record_file):
    config = PipelineConfig(input_path=record_file, output_dir=tmp_path / "out", export_images=False,
                            modes=[RenderMode.BIN])
    result = pipeline.run_pipeline(config)
    assert list(result.views) == [RenderMode.BIN]
    assert not (tmp_path / "out" / "wafer_map_bin.png").exists()

def test_run_pipeline_missing_source_writes_nothing(tmp_path):
    out = tmp_path / "output"
    config = PipelineConfig(input_path=tmp_path / "missing.txt", output_dir=out)
    with pytest.raises(SourceMissingError):
        pipeline.run_pipeline(config)
    assert not out.exists()

def test_run_pipeline_empty_dataset(tmp_path, fake_png):
    path = tmp_path / "empty.txt"
    path.write_text("FAR|1|4\nMIR|lot\n", encoding="utf-8")
    config = PipelineConfig(input_path=path, output_dir=tmp_path / "output")
    result = pipeline.run_pipeline(config)
    assert all(view.is_empty for view in result.views.values())
    summary = (tmp_path / "output" / "wafer_yield_summary.txt").read_text(encoding="utf-8")
    assert "Total Chips: 0" in summary
    assert "Yield Rate: 0.00%" in summary

def test_pipeline_config_validation(tmp_path):
    with pytest.raises(ValueError):
        PipelineConfig(cell_size=0)
    config = PipelineConfig(input_path="a.txt", output_dir=tmp_path, modes=["bin"])
    assert config.modes == [RenderMode.BIN]
    assert config.image_path(RenderMode.BIN).name == "wafer_map_bin.png"

def test_main_prints_console_map(tmp_path, record_file, capsys):
    code = pipeline.main([str(record_file), "-o", str(tmp_path / "output"), "--no-images"])
    assert code == 0
    out = capsys.readouterr().out
    assert "   1      F   ." in out
    assert "Yield Rate: 33.33%" in out

def test_main_missing_source_returns_error(tmp_path):
    assert pipeline.main([str(tmp_path / "missing.txt"), "-o", str(tmp_path / "output")]) == 1
