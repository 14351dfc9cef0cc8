"""
PlyCut - Plywood Panel Layout Optimizer
Streamlit web application for guillotine cutting layouts on identical stock boards.
"""

import io
import logging

import pandas as pd
import streamlit as st

import config
from data_models import BoardDimensions, CutSettings
from optimization_core import calculate_layout
from parsers import CutListError, build_piece, load_cut_list
from report_generators import create_excel_report
from simple_reports import generate_cutlist_csv, generate_cutting_layout_text, generate_scrap_csv
from utils import (display_board_summary, display_layout_metrics, display_messages, format_area,
                   from_mm, placed_pieces_frame, setup_logging, to_mm, usable_scrap_frame,
                   validate_file_upload)

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="PlyCut - Panel Layout Optimizer",
    page_icon="🪚",
    layout="wide",
    initial_sidebar_state="expanded"
)


def create_sample_data() -> str:
    """Sample cut list for trying the tool out."""
    return """Name,Width,Length,Quantity,Priority,Grain
Cabinet Side,560,720,4,1,length
Cabinet Top,560,764,2,2,none
Shelf,540,744,6,3,none
Back Panel,764,720,2,4,width
Door,396,716,4,1,length"""


def init_session_state():
    if 'units' not in st.session_state:
        st.session_state.units = 'mm'
    if 'board' not in st.session_state:
        st.session_state.board = BoardDimensions.defaults()
    if 'settings' not in st.session_state:
        st.session_state.settings = CutSettings.defaults()
    if 'pieces' not in st.session_state:
        st.session_state.pieces = []
    if 'result' not in st.session_state:
        st.session_state.result = None


def main():
    """Main application function."""
    st.title("🪚 PlyCut - Panel Layout Optimizer")
    st.markdown("**Guillotine cutting layouts with kerf, edge trim and grain direction**")

    init_session_state()

    st.sidebar.title("Navigation")
    page = st.sidebar.selectbox(
        "Choose a page:",
        ["🏠 Home", "📐 Board & Settings", "📋 Pieces", "⚙️ Layout", "❓ Help"]
    )
    st.session_state.units = st.sidebar.radio(
        "Units", ['mm', 'inches'],
        index=0 if st.session_state.units == 'mm' else 1
    )

    if page == "🏠 Home":
        show_home_page()
    elif page == "📐 Board & Settings":
        show_board_settings_page()
    elif page == "📋 Pieces":
        show_pieces_page()
    elif page == "⚙️ Layout":
        show_layout_page()
    elif page == "❓ Help":
        show_help_page()


def show_home_page():
    """Display the home page with tool overview."""
    st.header("Welcome to PlyCut")
    st.markdown(f"""
    ### 🎯 What does PlyCut do?

    PlyCut places rectangular pieces onto identical stock boards using guillotine cuts:

    - **Largest pieces first**: pieces are sorted by length, then width
    - **Best Short Side Fit**: each piece goes where it leaves the smallest short-side leftover
    - **Kerf and edge trim**: blade width and board edge margins are taken into account
    - **Grain direction**: grain-directed pieces are never rotated when grain is respected
    - **Usable scrap**: leftovers above your minimum size are listed for reuse

    Default stock is a {config.DEFAULT_BOARD_WIDTH_MM:.0f} x {config.DEFAULT_BOARD_LENGTH_MM:.0f} mm
    sheet, {config.DEFAULT_BOARD_THICKNESS_MM:.0f} mm thick.
    """)

    st.download_button(
        label="📥 Download Sample Cut List",
        data=create_sample_data(),
        file_name="sample_cut_list.csv",
        mime="text/csv"
    )


def show_board_settings_page():
    """Edit stock board dimensions and cut settings."""
    st.header("📐 Board & Settings")
    units = st.session_state.units
    board = st.session_state.board
    settings = st.session_state.settings
    step = 1.0 if units == 'mm' else 0.0625

    with st.form("board_settings"):
        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Stock Board")
            width = st.number_input(f"Board width ({units})", min_value=0.0, step=step,
                                    value=float(from_mm(board.width_mm, units)))
            length = st.number_input(f"Board length ({units})", min_value=0.0, step=step,
                                     value=float(from_mm(board.length_mm, units)))
        with col2:
            st.subheader("Cutting")
            kerf = st.number_input(f"Kerf ({units})", min_value=0.0, step=step / 4,
                                   value=float(from_mm(settings.kerf_mm, units)))
            edge_trim = st.number_input(f"Edge trim ({units})", min_value=0.0, step=step,
                                        value=float(from_mm(settings.edge_trim_mm, units)))
            min_scrap_width = st.number_input(f"Min scrap width ({units})", min_value=0.0, step=step,
                                              value=float(from_mm(settings.min_scrap_width_mm, units)))
            min_scrap_length = st.number_input(f"Min scrap length ({units})", min_value=0.0, step=step,
                                               value=float(from_mm(settings.min_scrap_length_mm, units)))
            respect_grain = st.checkbox("Respect grain direction", value=settings.respect_grain)
            algo = st.selectbox(
                "Optimization goal", list(config.OPTIMIZATION_ALGORITHMS),
                index=list(config.OPTIMIZATION_ALGORITHMS).index(settings.optimization_algo)
                if settings.optimization_algo in config.OPTIMIZATION_ALGORITHMS else 0,
                help="Currently every goal uses the same minimum-leftover placement."
            )

        if st.form_submit_button("💾 Save", type="primary"):
            st.session_state.board = BoardDimensions(to_mm(width, units), to_mm(length, units))
            st.session_state.settings = CutSettings(
                kerf_mm=to_mm(kerf, units),
                edge_trim_mm=to_mm(edge_trim, units),
                min_scrap_width_mm=to_mm(min_scrap_width, units),
                min_scrap_length_mm=to_mm(min_scrap_length, units),
                respect_grain=respect_grain,
                optimization_algo=algo,
            )
            st.success("Board and settings saved.")

    if st.button("↩️ Reset to defaults"):
        st.session_state.board = BoardDimensions.defaults()
        st.session_state.settings = CutSettings.defaults()
        st.rerun()


def show_pieces_page():
    """Add pieces manually or from a cut list file."""
    st.header("📋 Pieces")
    units = st.session_state.units

    tab1, tab2 = st.tabs(["✏️ Add Piece", "📎 File Upload"])

    with tab1:
        with st.form("add_piece", clear_on_submit=True):
            col1, col2, col3 = st.columns(3)
            with col1:
                name = st.text_input("Name")
                quantity = st.number_input("Quantity", min_value=1, value=1, step=1)
            with col2:
                width = st.number_input(f"Width ({units})", min_value=0.0)
                length = st.number_input(f"Length ({units})", min_value=0.0)
            with col3:
                priority = st.slider("Priority", config.MIN_PRIORITY, config.MAX_PRIORITY, config.MAX_PRIORITY)
                grain = st.selectbox("Grain direction", list(config.GRAIN_DIRECTIONS), index=2)

            if st.form_submit_button("➕ Add Piece", type="primary"):
                try:
                    piece = build_piece(width, length, quantity=quantity, name=name,
                                        priority=priority, grain=grain, units=units)
                    st.session_state.pieces.append(piece)
                    st.success(f"Added {piece.name}")
                except ValueError as e:
                    st.error(f"Error: {e}")

    with tab2:
        uploaded = st.file_uploader("Cut list (CSV or Excel)", type=['csv', 'xlsx', 'xls'])
        replace = st.checkbox("Replace current pieces", value=True)
        col1, col2 = st.columns(2)
        with col1:
            if st.button("🔄 Load File", type="primary") and validate_file_upload(
                    uploaded, ['.csv', '.xlsx', '.xls']):
                load_pieces(uploaded, units, replace)
        with col2:
            if st.button("📥 Load Sample Data", type="secondary"):
                sample = io.StringIO(create_sample_data())
                load_pieces(sample, 'mm', replace)

    show_pieces_table()


def load_pieces(source, units: str, replace: bool):
    with st.spinner("Processing cut list..."):
        try:
            pieces = load_cut_list(source, units=units)
        except CutListError as e:
            st.error(str(e))
            return
    if replace:
        st.session_state.pieces = pieces
    else:
        st.session_state.pieces.extend(pieces)
    st.success(f"✅ Loaded {len(pieces)} piece types")


def show_pieces_table():
    pieces = st.session_state.pieces
    units = st.session_state.units
    if not pieces:
        st.info("No pieces yet.")
        return

    st.subheader(f"Current Pieces ({len(pieces)} types, {sum(p.quantity for p in pieces)} pieces)")
    df = pd.DataFrame([{
        'Name': p.name,
        'Width': round(from_mm(p.width_mm, units), 2),
        'Length': round(from_mm(p.length_mm, units), 2),
        'Quantity': p.quantity,
        'Priority': p.priority,
        'Grain': p.grain_direction,
    } for p in pieces])
    st.dataframe(df, use_container_width=True)

    to_remove = st.multiselect("Remove pieces", options=range(len(pieces)),
                               format_func=lambda i: pieces[i].name)
    col1, col2 = st.columns(2)
    with col1:
        if st.button("🗑️ Remove Selected") and to_remove:
            st.session_state.pieces = [p for i, p in enumerate(pieces) if i not in to_remove]
            st.rerun()
    with col2:
        if st.button("🧹 Clear All"):
            st.session_state.pieces = []
            st.rerun()


def show_layout_page():
    """Run the optimizer and show the result."""
    st.header("⚙️ Layout")
    board = st.session_state.board
    settings = st.session_state.settings
    pieces = st.session_state.pieces

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Piece Types", len(pieces))
    with col2:
        st.metric("Pieces", sum(p.quantity for p in pieces))
    with col3:
        st.metric("Requested Area", format_area(sum(p.get_area() * p.quantity for p in pieces)))

    job_name = st.text_input("Job name", value=st.session_state.get('job_name', ''))
    st.session_state.job_name = job_name

    if st.button("🚀 Calculate Layout", type="primary"):
        events = []
        with st.spinner("Calculating layout..."):
            st.session_state.result = calculate_layout(board, pieces, settings, on_event=events.append)
        st.session_state.events = events

    result = st.session_state.result
    if result is None:
        return

    display_messages(result)
    display_layout_metrics(result)
    display_board_summary(result)

    units = st.session_state.units
    tab1, tab2, tab3 = st.tabs(["🧩 Placed Pieces", "♻️ Usable Scrap", "📄 Reports"])
    with tab1:
        st.dataframe(placed_pieces_frame(result, units), use_container_width=True)
    with tab2:
        st.dataframe(usable_scrap_frame(result, units), use_container_width=True)
    with tab3:
        st.download_button("📄 Layout Report (TXT)", generate_cutting_layout_text(result, job_name),
                           file_name="layout_report.txt", mime="text/plain")
        st.download_button("📊 Cut List (CSV)", generate_cutlist_csv(result, job_name),
                           file_name="cut_list.csv", mime="text/csv")
        st.download_button("♻️ Usable Scrap (CSV)", generate_scrap_csv(result),
                           file_name="usable_scrap.csv", mime="text/csv")
        try:
            st.download_button("📗 Full Report (Excel)", create_excel_report(result, job_name),
                               file_name="layout_report.xlsx",
                               mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        except Exception as e:
            st.error(f"Excel report failed: {e}")

    with st.expander("Calculation log"):
        for event in st.session_state.get('events', []):
            st.text(f"[{event.kind}] {event.message}")


def show_help_page():
    st.header("❓ Help")
    st.markdown("""
    **Cut list columns** (case-insensitive): `Width`, `Length` (required), `Quantity`,
    `Name`, `Priority` (1-5), `Grain` (`length`, `width` or `none`).

    **Edge trim** is removed from all four board edges before placing anything.
    **Kerf** is subtracted once per saw cut.

    **Waste** is the share of the used boards not covered by placed pieces.
    Pieces larger than the trimmed board are reported as unplaced.
    """)


if __name__ == "__main__":
    setup_logging()
    main()
