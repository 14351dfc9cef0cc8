"""
Cut list parsers for the PlyCut panel layout optimizer.
Reads piece lists from CSV or Excel files and converts them to millimetres.
"""

import logging
import math
import os
import uuid
from typing import Any, Dict, List, Optional

import pandas as pd

import config
from data_models import CutPiece
from utils import to_mm

logger = logging.getLogger(__name__)

# Accepted header spellings, compared case-insensitively
COLUMN_ALIASES = {
    'id': ['id', 'piece id', 'part id'],
    'name': ['name', 'piece name', 'panel name', 'description'],
    'width': ['width', 'width (mm)', 'width (in)', 'cut width'],
    'length': ['length', 'length (mm)', 'length (in)', 'cut length'],
    'quantity': ['quantity', 'qty'],
    'priority': ['priority'],
    'grain': ['grain', 'grain direction', 'graindirection', 'grains'],
}

REQUIRED_COLUMNS = ['width', 'length']

EXCEL_EXTENSIONS = ('.xlsx', '.xlsm', '.xls')


class CutListError(ValueError):
    """Raised when a cut list file cannot be used at all."""


def _resolve_columns(columns) -> Dict[str, str]:
    lookup = {str(col).strip().lower(): col for col in columns}
    resolved = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in lookup:
                resolved[field_name] = lookup[alias]
                break
    return resolved


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ''


def _round_half_up(value: Any) -> int:
    # Same rounding the optimizer applies to quantities: 2.5 -> 3
    return int(math.floor(float(value) + 0.5))


def normalize_grain(value: Any) -> str:
    """
    Map free-form grain input to 'length', 'width' or 'none'.
    """
    if _is_blank(value):
        return 'none'
    text = str(value).strip().lower()
    if text in config.GRAIN_DIRECTIONS:
        return text
    # Legacy sheets mark grain-sensitive parts with 1/yes, meaning along the length
    if text in ('1', 'yes', 'true', 'y'):
        return 'length'
    logger.warning(f"Unknown grain direction '{value}', using 'none'")
    return 'none'


def build_piece(width: Any, length: Any, quantity: Any = 1, name: Any = None,
                priority: Any = None, grain: Any = None, units: str = 'mm',
                piece_id: Optional[str] = None) -> CutPiece:
    """
    Create a CutPiece from raw user input.

    Args:
        width, length: Dimensions in display units
        quantity: Requested count, rounded and at least 1
        name: Display name; generated from the dimensions when empty
        priority: 1-5, defaults to 5
        grain: Grain direction ('length', 'width', 'none' or a yes/no flag)
        units: 'mm' or 'inches'
        piece_id: Explicit id; a random one is generated when missing

    Returns:
        CutPiece with dimensions in mm

    Raises:
        ValueError: If width or length is not a positive number
    """
    width_value = float(width)
    length_value = float(length)
    if not (math.isfinite(width_value) and math.isfinite(length_value)) or \
            width_value <= 0 or length_value <= 0:
        raise ValueError(f"Piece width and length must be positive numbers, got {width}x{length}")

    width_mm = to_mm(width_value, units)
    length_mm = to_mm(length_value, units)

    try:
        quantity_value = max(1, _round_half_up(quantity))
    except (TypeError, ValueError, OverflowError):
        quantity_value = 1

    try:
        priority_value = _round_half_up(priority)
        priority_value = max(config.MIN_PRIORITY, min(config.MAX_PRIORITY, priority_value))
    except (TypeError, ValueError, OverflowError):
        priority_value = config.MAX_PRIORITY

    display_name = '' if _is_blank(name) else str(name).strip()
    if not display_name:
        display_name = f"Piece {width_mm:.0f}x{length_mm:.0f}"

    return CutPiece(
        piece_id=piece_id or uuid.uuid4().hex,
        name=display_name,
        width_mm=width_mm,
        length_mm=length_mm,
        quantity=quantity_value,
        priority=priority_value,
        grain_direction=normalize_grain(grain),
    )


def _read_table(source) -> pd.DataFrame:
    filename = source if isinstance(source, str) else getattr(source, 'name', '')
    extension = os.path.splitext(str(filename))[1].lower()
    if extension in EXCEL_EXTENSIONS:
        return pd.read_excel(source)
    return pd.read_csv(source)


def load_cut_list(source, units: str = 'mm') -> List[CutPiece]:
    """
    Load a piece list from a CSV or Excel file.

    Args:
        source: File path or file-like object (e.g. a Streamlit upload)
        units: Units of the width/length columns, 'mm' or 'inches'

    Returns:
        List of CutPiece objects in mm. Invalid rows are logged and skipped.

    Raises:
        FileNotFoundError: If the file does not exist
        CutListError: If the file cannot be parsed or required columns are missing

    Expected columns (case-insensitive):
        - Width, Length: Piece dimensions (required)
        - Quantity / Qty, Name, Priority, Grain, ID (optional)
    """
    try:
        df = _read_table(source)
    except FileNotFoundError:
        logger.error(f"Cut list file not found: {source}")
        raise
    except Exception as e:
        logger.error(f"Error reading cut list: {e}")
        raise CutListError(f"Could not read cut list: {e}") from e

    columns = _resolve_columns(df.columns)
    missing_columns = [col for col in REQUIRED_COLUMNS if col not in columns]
    if missing_columns:
        raise CutListError(f"Missing required columns in cut list: {missing_columns}")

    logger.info(f"Loading {len(df)} rows from cut list")

    def cell(row, field_name):
        column = columns.get(field_name)
        if column is None:
            return None
        value = row[column]
        return None if _is_blank(value) else value

    pieces = []
    for index, row in df.iterrows():
        if all(_is_blank(value) for value in row.values):
            continue
        try:
            piece_id = cell(row, 'id')
            piece = build_piece(
                width=cell(row, 'width'),
                length=cell(row, 'length'),
                quantity=cell(row, 'quantity') if cell(row, 'quantity') is not None else 1,
                name=cell(row, 'name'),
                priority=cell(row, 'priority'),
                grain=cell(row, 'grain'),
                units=units,
                piece_id=str(piece_id) if piece_id is not None else None,
            )
            pieces.append(piece)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping row {index + 2} in cut list: {e}")
            continue

    logger.info(f"Successfully loaded {len(pieces)} piece types")
    return pieces
