"""
Best Short Side Fit (BSSF) placement of a single piece into a board's free rectangles.
"""

from typing import Callable, NamedTuple, Optional, Sequence

from data_models import CutPiece, CutSettings, FreeRectangle, Rectangle
from geometry import fits

# score_fn(rect, placed_width, placed_length) -> score, lower is better
ScoreFunction = Callable[[Rectangle, float, float], float]


class PlacementCandidate(NamedTuple):
    """Best spot found for a piece on one board."""
    node_index: int
    placement_rect: Rectangle
    is_rotated: bool
    score: float


def score_short_side_fit(rect: Rectangle, placed_width: float, placed_length: float) -> float:
    """Smaller of the two leftover sides after fitting the piece into rect."""
    return min(rect.width - placed_width, rect.length - placed_length)


def find_best_placement(piece: CutPiece, free_rectangles: Sequence[FreeRectangle],
                        settings: CutSettings,
                        score_fn: ScoreFunction = score_short_side_fit) -> Optional[PlacementCandidate]:
    """
    Find the best position for a piece among a board's free rectangles.

    Every rectangle is tried unrotated and, when grain allows, rotated. The lowest
    score wins; on equal scores the first candidate found is kept, so earlier
    rectangles beat later ones and unrotated beats rotated.

    Args:
        piece: Piece instance to place
        free_rectangles: Free rectangles of one board, in list order
        settings: Cut settings (only respect_grain is used here)
        score_fn: Scoring heuristic

    Returns:
        PlacementCandidate anchored at the chosen rectangle's top-left corner,
        or None if the piece fits nowhere
    """
    best: Optional[PlacementCandidate] = None
    can_rotate = piece.can_rotate(settings.respect_grain)

    for index, rect in enumerate(free_rectangles):
        orientations = [(piece.width_mm, piece.length_mm, False)]
        if can_rotate:
            orientations.append((piece.length_mm, piece.width_mm, True))

        for placed_width, placed_length, rotated in orientations:
            if not fits(placed_width, placed_length, rect):
                continue
            score = score_fn(rect, placed_width, placed_length)
            if best is None or score < best.score:
                best = PlacementCandidate(
                    node_index=index,
                    placement_rect=Rectangle(rect.x, rect.y, placed_width, placed_length),
                    is_rotated=rotated,
                    score=score,
                )

    return best
