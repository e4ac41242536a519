"""
Main Application File for the Wafer Map Viewer Streamlit Dashboard.
Shows the PART_ID and BIN wafer maps side by side, the yield summary,
the console-style P/F map and the per-die table with CSV download.
"""
import streamlit as st

from wafermap.analytics.yield_analysis import summarize_yield
from wafermap.core.config import CELL_SIZE, PADDING, DEFAULT_THEME
from wafermap.enums import RenderMode
from wafermap.io.exporters.csv_export import grid_to_csv_bytes
from wafermap.io.ingestion import build_wafer_grid, LoadResult
from wafermap.io.sample_generator import generate_sample_lines
from wafermap.plotting.colors import bin_legend
from wafermap.plotting.renderers.figures import create_dual_panel_figure
from wafermap.plotting.renderers.maps import render_mode
from wafermap.reporting import format_text_map, format_yield_summary, TEXT_MAP_LEGEND
from wafermap.utils.logger import configure_logging
from wafermap.utils.telemetry import PerformanceMonitor

@st.cache_resource(show_spinner="Loading Wafer Data...")
def load_grid_from_bytes(data: bytes) -> LoadResult:
    """Parses uploaded record bytes; cached on the file content."""
    return build_wafer_grid(data.decode('utf-8', errors='replace').splitlines())

@st.cache_resource(show_spinner="Generating Sample Wafer...")
def load_sample_grid(radius: int) -> LoadResult:
    return build_wafer_grid(generate_sample_lines(radius=radius))

def render_legend() -> None:
    rows = "".join(
        f'''
        <div style="display: flex; align-items: center; margin-bottom: 10px;">
            <div style="width: 20px; height: 20px; background-color: {color}; margin-right: 10px; border: 1px solid black;"></div>
            <span>{label}</span>
        </div>'''
        for _, label, color in bin_legend(DEFAULT_THEME)
    )
    st.markdown(f'<div style="display: flex; flex-direction: column; align-items: flex-start;">{rows}</div>', unsafe_allow_html=True)

def main() -> None:
    """Main function to configure and run the Streamlit application."""
    st.set_page_config(layout="wide", page_title="Wafer Map Viewer")

    if 'load_result' not in st.session_state: st.session_state.load_result = None
    if 'source_name' not in st.session_state: st.session_state.source_name = ""

    # --- Sidebar Control Panel ---
    with st.sidebar:
        st.title("🎛️ Control Panel")
        with st.form(key="analysis_form"):
            with st.expander("📁 Data Source & Configuration", expanded=True):
                uploaded_file = st.file_uploader("Upload PRR record file (pipe-delimited)", type=["txt", "out", "psv"])
                sample_radius = st.number_input("Sample Wafer Radius (dies)", min_value=1, max_value=40, value=6, help="Used when no file is uploaded.")
                cell_size = st.number_input("Cell Size (px)", min_value=4, max_value=60, value=CELL_SIZE)
            submitted = st.form_submit_button("🚀 Run Analysis")

    st.title("🧭 Wafer Map Viewer")

    if submitted:
        if uploaded_file is not None:
            st.session_state.load_result = load_grid_from_bytes(uploaded_file.getvalue())
            st.session_state.source_name = uploaded_file.name
        else:
            st.session_state.load_result = load_sample_grid(int(sample_radius))
            st.session_state.source_name = f"Sample Wafer (radius {int(sample_radius)})"
        st.session_state.cell_size = int(cell_size)
        st.rerun()

    load_result = st.session_state.load_result
    if load_result is None:
        st.header("Welcome to the Wafer Map Viewer!")
        st.info("Upload a PRR record file or use the sample wafer, then click 'Run Analysis'.")
        return

    grid = load_result.grid
    cell = st.session_state.get('cell_size', CELL_SIZE)
    st.caption(f"Source: {st.session_state.source_name}")

    if load_result.errors:
        with st.expander(f"⚠️ {len(load_result.errors)} lines skipped"):
            st.code("\n".join(load_result.errors))
    if load_result.warnings:
        with st.expander(f"⚠️ {len(load_result.warnings)} bin values defaulted to 0"):
            st.code("\n".join(load_result.warnings))

    map_col, summary_col = st.columns([3, 1])

    with map_col:
        id_view = render_mode(grid, RenderMode.IDENTIFIER, cell, PADDING)
        bin_view = render_mode(grid, RenderMode.BIN, cell, PADDING)
        fig = create_dual_panel_figure(id_view, bin_view, grid=grid)
        st.plotly_chart(fig, use_container_width=True)

    with summary_col:
        summary = summarize_yield(grid)
        st.subheader("Yield Summary")
        st.metric("Yield Rate", f"{summary.yield_rate:.2f}%")
        st.metric("PASS (BIN=1)", f"{summary.pass_count:,} / {summary.total_chips:,}")
        st.metric("Fail", f"{summary.fail_count:,}")
        st.download_button("📥 Download Yield Summary", data=format_yield_summary(summary).encode('utf-8'),
                           file_name="wafer_yield_summary.txt", mime="text/plain")
        st.divider()
        st.subheader("Legend")
        render_legend()

    st.divider()
    with st.expander(f"Console Map ({TEXT_MAP_LEGEND})", expanded=False):
        st.code(format_text_map(grid))

    with st.expander("Die Table", expanded=False):
        st.dataframe(grid.to_dataframe(), use_container_width=True)
        st.download_button("📥 Download CSV", data=grid_to_csv_bytes(grid), file_name="converted.csv",
                           mime="text/csv", disabled=grid.is_empty)

    with st.expander("Performance Log", expanded=False):
        logs = PerformanceMonitor.to_dataframe()
        if logs.empty:
            st.info("No timings recorded yet.")
        else:
            st.dataframe(logs, use_container_width=True)

if __name__ == '__main__':
    configure_logging()
    main()
