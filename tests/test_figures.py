import plotly.graph_objects as go
from wafermap.core.config import MapTheme
from wafermap.core.models import WaferGrid
from wafermap.enums import RenderMode
from wafermap.plotting.renderers.figures import create_wafer_map_figure, create_dual_panel_figure
from wafermap.plotting.renderers.maps import render_mode

def test_wafer_map_figure_matches_buffer(ring_grid):
    view = render_mode(ring_grid, RenderMode.IDENTIFIER)
    fig = create_wafer_map_figure(view, grid=ring_grid)
    assert isinstance(fig, go.Figure)
    assert isinstance(fig.data[0], go.Image)
    assert fig.layout.width == view.width
    texts = {a.text for a in fig.layout.annotations}
    assert {"-1", "0", "1"} <= texts
    assert {r.identifier for r in ring_grid} <= texts
    hover = [t for t in fig.data if isinstance(t, go.Scatter) and t.hoverinfo == 'text']
    assert len(hover) == 1
    assert len(hover[0].x) == len(ring_grid)

def test_bin_figure_has_legend(ring_grid):
    view = render_mode(ring_grid, RenderMode.BIN)
    fig = create_wafer_map_figure(view)
    names = {t.name for t in fig.data if isinstance(t, go.Scatter)}
    assert {"Pass (BIN=1)", "Fail", "No Data"} <= names

def test_empty_figure_shows_message():
    view = render_mode(WaferGrid(), RenderMode.BIN)
    fig = create_wafer_map_figure(view, grid=WaferGrid())
    assert [a.text for a in fig.layout.annotations] == [view.message.text]
    assert len(fig.data) == 1

def test_dual_panel_figure(ring_grid):
    id_view = render_mode(ring_grid, RenderMode.IDENTIFIER)
    bin_view = render_mode(ring_grid, RenderMode.BIN)
    fig = create_dual_panel_figure(id_view, bin_view, grid=ring_grid)
    images = [t for t in fig.data if isinstance(t, go.Image)]
    assert len(images) == 2
    texts = [a.text for a in fig.layout.annotations]
    assert id_view.title in texts and bin_view.title in texts
    assert any(a.xref == "x2" for a in fig.layout.annotations)

def test_label_color_comes_from_theme(ring_grid):
    theme = MapTheme(text_color="#123456")
    view = render_mode(ring_grid, RenderMode.IDENTIFIER, theme=theme)
    fig = create_wafer_map_figure(view, theme=theme)
    assert {a.font.color for a in fig.layout.annotations} == {"#123456"}
