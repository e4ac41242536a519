import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import List, Optional

from wafermap.core.config import (
    MapTheme, DEFAULT_THEME, CELL_LABEL_FONT_SIZE, AXIS_LABEL_FONT_SIZE
)
from wafermap.core.models import WaferGrid
from wafermap.enums import RenderMode
from wafermap.plotting.colors import bin_legend
from wafermap.plotting.renderers.maps import RenderView, TextLabel

def _label_annotations(labels: List[TextLabel], font_size: int, color: str, xref: str = "x", yref: str = "y") -> List[dict]:
    # go.Image puts pixel centers on integers, so pixel edges sit at -0.5.
    return [
        dict(
            x=label.x - 0.5, y=label.y - 0.5, xref=xref, yref=yref,
            text=label.text, showarrow=False,
            font=dict(size=font_size, color=color, family="Arial"),
            xanchor="center", yanchor="middle"
        )
        for label in labels
    ]

def _view_annotations(view: RenderView, theme: MapTheme, xref: str = "x", yref: str = "y") -> List[dict]:
    if view.is_empty:
        return _label_annotations([view.message], AXIS_LABEL_FONT_SIZE + 2, theme.message_color, xref, yref)
    annotations = _label_annotations(view.x_labels + view.y_labels, AXIS_LABEL_FONT_SIZE, theme.text_color, xref, yref)
    annotations += _label_annotations(view.cell_labels, CELL_LABEL_FONT_SIZE, theme.text_color, xref, yref)
    return annotations

def _hover_trace(view: RenderView, grid: WaferGrid) -> Optional[go.Scatter]:
    """Invisible markers at die centers that carry the per-die tooltip."""
    if view.is_empty:
        return None
    hover_x, hover_y, hover_text = [], [], []
    center = view.cell_size / 2 - 0.5
    for record in grid:
        left, top = view.cell_origin(record.x, record.y)
        hover_x.append(left + center)
        hover_y.append(top + center)
        hover_text.append(
            f"<b>Die: ({record.x}, {record.y})</b><br>"
            f"PART_ID: {record.identifier}<br>"
            f"BIN: {record.bin_value} ({record.status.name})"
        )
    if not hover_x:
        return None
    return go.Scatter(
        x=hover_x, y=hover_y, mode='markers',
        marker=dict(size=view.cell_size, opacity=0),
        text=hover_text, hoverinfo='text', showlegend=False
    )

def _image_trace(view: RenderView) -> go.Image:
    return go.Image(z=view.pixels, colormodel='rgba', hoverinfo='skip')

def _legend_traces(theme: MapTheme) -> List[go.Scatter]:
    # Shapes and images do not show in the legend, so add dummy entries.
    return [
        go.Scatter(
            x=[None], y=[None], mode='markers',
            marker=dict(size=10, color=color, symbol='square', line=dict(width=1, color=theme.outline_color)),
            name=label
        )
        for _, label, color in bin_legend(theme)
    ]

def create_wafer_map_figure(
    view: RenderView,
    grid: Optional[WaferGrid] = None,
    theme: MapTheme = DEFAULT_THEME,
    show_title: bool = True
) -> go.Figure:
    """
    Wraps a rendered view in a Plotly figure sized 1:1 to the pixel buffer.
    """
    fig = go.Figure(data=[_image_trace(view)])

    if grid is not None:
        hover = _hover_trace(view, grid)
        if hover is not None:
            fig.add_trace(hover)
    show_legend = show_title and view.mode is RenderMode.BIN and not view.is_empty
    if show_legend:
        for trace in _legend_traces(theme):
            fig.add_trace(trace)

    top_margin = 40 if show_title else 0
    fig.update_layout(
        title=dict(text=view.title, x=0.5, xanchor='center', font=dict(color=theme.text_color, size=16)) if show_title else None,
        annotations=_view_annotations(view, theme),
        width=view.width,
        height=view.height + top_margin,
        margin=dict(l=0, r=0, t=top_margin, b=0),
        paper_bgcolor=theme.background_color,
        plot_bgcolor=theme.background_color,
        showlegend=show_legend,
        legend=dict(x=1.0, y=1.0, xanchor='right', yanchor='bottom', orientation='h',
                    font=dict(color=theme.text_color), bgcolor='rgba(0,0,0,0)'),
        hoverlabel=dict(bgcolor="#4A4A4A", font_size=14, font_family="sans-serif")
    )
    fig.update_xaxes(visible=False, range=[-0.5, view.width - 0.5])
    fig.update_yaxes(visible=False, range=[view.height - 0.5, -0.5], scaleanchor="x", scaleratio=1)
    return fig

def create_dual_panel_figure(
    identifier_view: RenderView,
    bin_view: RenderView,
    grid: Optional[WaferGrid] = None,
    theme: MapTheme = DEFAULT_THEME
) -> go.Figure:
    """
    Side-by-side figure with the identifier map on the left and the bin map on the right.
    """
    fig = make_subplots(
        rows=1, cols=2,
        subplot_titles=(identifier_view.title, bin_view.title),
        horizontal_spacing=0.04
    )

    annotations = list(fig.layout.annotations)  # subplot titles
    for col, view in ((1, identifier_view), (2, bin_view)):
        fig.add_trace(_image_trace(view), row=1, col=col)
        if grid is not None:
            hover = _hover_trace(view, grid)
            if hover is not None:
                fig.add_trace(hover, row=1, col=col)
        suffix = "" if col == 1 else str(col)
        annotations += _view_annotations(view, theme, xref=f"x{suffix}", yref=f"y{suffix}")
        fig.update_xaxes(visible=False, range=[-0.5, view.width - 0.5], row=1, col=col)
        fig.update_yaxes(visible=False, range=[view.height - 0.5, -0.5],
                         scaleanchor=f"x{suffix}", scaleratio=1, row=1, col=col)

    fig.update_layout(
        annotations=annotations,
        height=max(identifier_view.height, bin_view.height) + 60,
        margin=dict(l=10, r=10, t=50, b=10),
        paper_bgcolor=theme.background_color,
        plot_bgcolor=theme.background_color,
        showlegend=False,
        hoverlabel=dict(bgcolor="#4A4A4A", font_size=14, font_family="sans-serif")
    )
    return fig
