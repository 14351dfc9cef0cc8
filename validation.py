"""
Input validation for layout runs.
Fatal problems are returned as errors; non-fatal ones as warnings.
"""

import logging
import math
from typing import List, Sequence, Tuple

import config
from data_models import BoardDimensions, CutPiece, CutSettings

logger = logging.getLogger(__name__)


def _is_finite_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def _is_positive(value) -> bool:
    return _is_finite_number(value) and float(value) > 0


def _is_non_negative(value) -> bool:
    return _is_finite_number(value) and float(value) >= 0


def get_usable_dimensions(board: BoardDimensions, settings: CutSettings) -> Tuple[float, float]:
    """
    Board dimensions left after removing the edge trim from all four sides.

    Returns:
        Tuple of (usable_width, usable_length) in mm, possibly <= 0
    """
    usable_width = board.width_mm - 2 * settings.edge_trim_mm
    usable_length = board.length_mm - 2 * settings.edge_trim_mm
    return usable_width, usable_length


def has_valid_dimensions(piece: CutPiece) -> bool:
    return _is_positive(piece.width_mm) and _is_positive(piece.length_mm)


def fits_usable_area(piece: CutPiece, usable_width: float, usable_length: float,
                     respect_grain: bool) -> bool:
    """
    Check whether a piece type fits an empty board in at least one allowed orientation.
    """
    if piece.width_mm <= usable_width and piece.length_mm <= usable_length:
        return True
    if piece.can_rotate(respect_grain):
        return piece.length_mm <= usable_width and piece.width_mm <= usable_length
    return False


def find_oversized_pieces(pieces: Sequence[CutPiece], board: BoardDimensions,
                          settings: CutSettings) -> List[CutPiece]:
    """
    Find piece types too large for the usable board area in every allowed orientation.

    Args:
        pieces: Requested piece types
        board: Stock board dimensions
        settings: Cut settings (edge trim and grain handling)

    Returns:
        Piece types that can never be placed, in input order
    """
    usable_width, usable_length = get_usable_dimensions(board, settings)
    return [
        piece for piece in pieces
        if has_valid_dimensions(piece)
        and not fits_usable_area(piece, usable_width, usable_length, settings.respect_grain)
    ]


def validate_inputs(board: BoardDimensions, pieces: Sequence[CutPiece],
                    settings: CutSettings) -> Tuple[List[str], List[str]]:
    """
    Validate board, pieces and settings before a layout run.

    Args:
        board: Stock board dimensions
        pieces: Requested piece types
        settings: Cut settings

    Returns:
        Tuple of (errors, warnings). Any error means no placement may be attempted.
    """
    errors: List[str] = []
    warnings: List[str] = []

    board_ok = _is_positive(board.width_mm) and _is_positive(board.length_mm)
    trim_ok = _is_non_negative(settings.edge_trim_mm)

    if not board_ok:
        errors.append("Board dimensions must be positive.")
    if not _is_non_negative(settings.kerf_mm):
        errors.append("Kerf cannot be negative.")
    if not trim_ok:
        errors.append("Edge trim cannot be negative.")
    if not (_is_non_negative(settings.min_scrap_width_mm) and
            _is_non_negative(settings.min_scrap_length_mm)):
        errors.append("Minimum scrap dimensions cannot be negative.")

    # Usable area and piece fit checks need a sane board and trim to mean anything
    if board_ok and trim_ok:
        usable_width, usable_length = get_usable_dimensions(board, settings)
        if (usable_width <= 0 or usable_length <= 0) and settings.edge_trim_mm > 0:
            errors.append(f"Edge trim ({settings.edge_trim_mm}mm) is too large for board dimensions.")

        oversized = find_oversized_pieces(pieces, board, settings)
        if oversized:
            warnings.append(
                f"Found {len(oversized)} piece type(s) larger than the usable board area: "
                f"{', '.join(p.label for p in oversized)}"
            )

    invalid_pieces = [piece for piece in pieces if not has_valid_dimensions(piece)]
    if invalid_pieces:
        warnings.append(
            f"Found {len(invalid_pieces)} piece type(s) with non-positive dimensions: "
            f"{', '.join(p.label for p in invalid_pieces)}"
        )

    if settings.optimization_algo not in config.OPTIMIZATION_ALGORITHMS:
        warnings.append(
            f"Unknown optimization algorithm '{settings.optimization_algo}', using 'waste'."
        )

    if errors:
        logger.error(f"Input validation failed: {errors}")
    for warning in warnings:
        logger.warning(warning)

    return errors, warnings
