"""
Post-run statistics: usable scrap, area totals and waste percentage.
"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from config import EPSILON
from data_models import BoardDimensions, CutPiece, CutSettings, FreeRectangle, PlacedPiece, UsableScrap

logger = logging.getLogger(__name__)


def is_usable_scrap(rect: FreeRectangle, min_width: float, min_length: float) -> bool:
    """
    Check whether a leftover rectangle meets the minimum scrap size in either orientation.
    """
    if rect.width <= EPSILON or rect.length <= EPSILON:
        return False
    return ((rect.width >= min_width - EPSILON and rect.length >= min_length - EPSILON) or
            (rect.width >= min_length - EPSILON and rect.length >= min_width - EPSILON))


def find_usable_scrap(boards: Iterable[Tuple[int, Sequence[FreeRectangle]]],
                      settings: CutSettings) -> List[UsableScrap]:
    """
    Collect usable scrap from the final free rectangles of every board.

    Args:
        boards: (board_index, free_rectangles) pairs
        settings: Provides min_scrap_width_mm and min_scrap_length_mm

    Returns:
        Usable scrap sorted by area, largest first
    """
    scrap = []
    for board_index, free_rectangles in boards:
        for rect in free_rectangles:
            if is_usable_scrap(rect, settings.min_scrap_width_mm, settings.min_scrap_length_mm):
                scrap.append(UsableScrap(
                    x=rect.x,
                    y=rect.y,
                    width=rect.width,
                    length=rect.length,
                    board_index=board_index,
                    area_mm2=rect.width * rect.length,
                ))

    scrap.sort(key=lambda s: s.area_mm2, reverse=True)
    logger.debug(f"Found {len(scrap)} usable scrap pieces")
    return scrap


def calculate_requested_area(pieces: Iterable[CutPiece]) -> float:
    return sum(p.width_mm * p.length_mm * max(0, p.quantity) for p in pieces)


def calculate_waste_percentage(placed_area: float, total_board_area: float,
                               requested_area: float) -> float:
    """
    Waste as a percentage of the board area used, clamped to 0-100.

    With no board area at all, waste is 100 if anything was requested, else 0.
    """
    if total_board_area <= 0:
        return 100.0 if requested_area > 0 else 0.0
    waste = 100 * (1 - placed_area / total_board_area)
    return min(100.0, max(0.0, waste))


def calculate_statistics(pieces: Sequence[CutPiece], placed_pieces: Sequence[PlacedPiece],
                         board_count: int, board: BoardDimensions) -> Dict[str, float]:
    """
    Calculate the area totals of a finished run.

    Args:
        pieces: Requested piece types
        placed_pieces: Everything that was placed
        board_count: Number of boards opened during allocation
        board: Stock board dimensions

    Returns:
        Dictionary with boards_used, total_pieces_area_mm2, total_placed_piece_area_mm2,
        total_boards_area_mm2 and waste_percentage
    """
    requested_area = calculate_requested_area(pieces)
    placed_area = sum(p.placed_width_mm * p.placed_length_mm for p in placed_pieces)
    boards_used = board_count if placed_pieces else 0
    total_board_area = boards_used * board.width_mm * board.length_mm

    return {
        'boards_used': boards_used,
        'total_pieces_area_mm2': requested_area,
        'total_placed_piece_area_mm2': placed_area,
        'total_boards_area_mm2': total_board_area,
        'waste_percentage': calculate_waste_percentage(placed_area, total_board_area, requested_area),
    }
