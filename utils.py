"""
Utility functions for the PlyCut panel layout optimizer.
"""

import logging
import os
from typing import Optional

import pandas as pd
import streamlit as st

import config
from data_models import LayoutResult


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to the PLYCUT_LOG_LEVEL environment setting.
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    level_name = (log_level or config.LOG_LEVEL).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    logging.getLogger('urllib3').setLevel(logging.WARNING)


def validate_file_upload(uploaded_file, expected_extensions: list) -> bool:
    """
    Validate uploaded file type and size.

    Args:
        uploaded_file: Streamlit uploaded file object
        expected_extensions: List of allowed file extensions

    Returns:
        True if file is valid, False otherwise
    """
    if uploaded_file is None:
        return False

    file_extension = os.path.splitext(uploaded_file.name)[1].lower()
    if file_extension not in expected_extensions:
        st.error(f"Invalid file type. Expected: {', '.join(expected_extensions)}")
        return False

    # 10MB is far beyond any realistic cut list
    max_size = 10 * 1024 * 1024
    if uploaded_file.size > max_size:
        st.error("File size too large. Maximum size is 10MB.")
        return False

    return True


def to_mm(value: float, units: str) -> float:
    """Convert a length in the given display units ('mm' or 'inches') to mm."""
    if units == 'inches':
        return value * config.INCHES_TO_MM
    return value


def from_mm(value_mm: float, units: str) -> float:
    """Convert a length in mm to the given display units ('mm' or 'inches')."""
    if units == 'inches':
        return value_mm / config.INCHES_TO_MM
    return value_mm


def format_length(value_mm: float, units: str = 'mm') -> str:
    """
    Format a length for display.

    Args:
        value_mm: Length in millimetres
        units: 'mm' or 'inches'

    Returns:
        Formatted length string
    """
    if units == 'inches':
        return f'{from_mm(value_mm, units):.2f}"'
    return f"{value_mm:.0f} mm"


def format_area(area_mm2: float) -> str:
    """
    Format area for display with appropriate units.

    Args:
        area_mm2: Area in square millimeters

    Returns:
        Formatted area string
    """
    if area_mm2 >= 1_000_000:
        return f"{area_mm2 / 1_000_000:.2f} m²"
    elif area_mm2 >= 1_000:
        return f"{area_mm2 / 1_000:.1f} cm²"
    else:
        return f"{area_mm2:.0f} mm²"


def format_percentage(value: float) -> str:
    """
    Format percentage for display.

    Args:
        value: Percentage value (0-100)

    Returns:
        Formatted percentage string
    """
    return f"{value:.1f}%"


def placed_pieces_frame(result: LayoutResult, units: str = 'mm') -> pd.DataFrame:
    """
    Build a table of placed pieces in display units.
    """
    rows = []
    for piece in result.placed_pieces:
        rows.append({
            'Board': piece.board_index + 1,
            'Piece': piece.name or piece.id,
            'Width': round(from_mm(piece.placed_width_mm, units), 2),
            'Length': round(from_mm(piece.placed_length_mm, units), 2),
            'X': round(from_mm(piece.x, units), 2),
            'Y': round(from_mm(piece.y, units), 2),
            'Rotated': 'Yes' if piece.is_rotated else 'No',
        })
    return pd.DataFrame(rows, columns=['Board', 'Piece', 'Width', 'Length', 'X', 'Y', 'Rotated'])


def usable_scrap_frame(result: LayoutResult, units: str = 'mm') -> pd.DataFrame:
    """
    Build a table of usable scrap in display units, largest first.
    """
    rows = []
    for scrap in result.usable_scrap:
        rows.append({
            'Board': scrap.board_index + 1,
            'Width': round(from_mm(scrap.width, units), 2),
            'Length': round(from_mm(scrap.length, units), 2),
            'X': round(from_mm(scrap.x, units), 2),
            'Y': round(from_mm(scrap.y, units), 2),
            'Area': format_area(scrap.area_mm2),
        })
    return pd.DataFrame(rows, columns=['Board', 'Width', 'Length', 'X', 'Y', 'Area'])


def display_layout_metrics(result: LayoutResult):
    """
    Display layout metrics in Streamlit columns.

    Args:
        result: Finished layout
    """
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Boards Used", result.boards_used)

    with col2:
        st.metric("Pieces Placed", len(result.placed_pieces))
        if result.unplaced_pieces:
            st.caption(f"{len(result.unplaced_pieces)} piece type(s) unplaced")

    with col3:
        st.metric("Waste", format_percentage(result.waste_percentage))

    with col4:
        st.metric("Usable Scrap", len(result.usable_scrap))


def display_board_summary(result: LayoutResult):
    """
    Display per-board summary table in Streamlit.

    Args:
        result: Finished layout
    """
    if not result.boards_used:
        st.info("No boards to display.")
        return

    board_data = []
    for index in range(result.boards_used):
        board_data.append({
            'Board': index + 1,
            'Dimensions': f"{result.board_dimensions.width_mm}×{result.board_dimensions.length_mm}mm",
            'Pieces': len(result.pieces_on_board(index)),
            'Utilization': format_percentage(result.board_utilization_percentage(index)),
            'Usable Scrap': len([s for s in result.usable_scrap if s.board_index == index]),
        })

    st.dataframe(board_data, use_container_width=True)


def display_messages(result: LayoutResult):
    """
    Display errors and warnings of a layout run.
    """
    for error in result.errors:
        st.error(error)
    for warning in result.warnings:
        st.warning(warning)
    if result.unplaced_pieces:
        names = ', '.join(p.name or p.id for p in result.unplaced_pieces)
        st.warning(f"Unplaced piece types: {names}")
