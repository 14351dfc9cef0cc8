"""
Guillotine free-space management: Split Longer Leftover Axis (SLLA) splitting and
containment pruning of free rectangles.
"""

import logging
from typing import List, Sequence

from config import EPSILON
from data_models import FreeRectangle, Rectangle
from geometry import contains, is_degenerate

logger = logging.getLogger(__name__)


def split_free_rectangle(free_rect: FreeRectangle, placed_rect: Rectangle,
                         kerf: float) -> List[FreeRectangle]:
    """
    Split a free rectangle after a piece was placed at its top-left corner.

    The primary cut runs along the axis with the longer leftover. The rectangle on
    the far side of the primary cut spans the full free rectangle and loses one
    kerf; the secondary rectangle only spans the placed piece and loses none.

    Args:
        free_rect: Free rectangle the piece was placed in
        placed_rect: Area occupied by the piece (dimensions as placed)
        kerf: Saw blade width in mm

    Returns:
        Zero, one or two new free rectangles. Empty if placed_rect is degenerate
        or does not lie inside free_rect.
    """
    if is_degenerate(placed_rect) or not contains(free_rect, placed_rect):
        logger.error(f"Placed rectangle {placed_rect} is invalid or outside free rectangle "
                     f"{free_rect} during split")
        return []

    new_rects = []
    leftover_width = free_rect.width - placed_rect.width
    leftover_length = free_rect.length - placed_rect.length

    if leftover_width <= leftover_length:
        # Vertical cut right of the piece first
        right_width = leftover_width - kerf
        if right_width > EPSILON:
            new_rects.append(FreeRectangle(
                x=free_rect.x + placed_rect.width + kerf,
                y=free_rect.y,
                width=right_width,
                length=free_rect.length,
            ))
        if leftover_length > EPSILON:
            new_rects.append(FreeRectangle(
                x=free_rect.x,
                y=free_rect.y + placed_rect.length,
                width=placed_rect.width,
                length=leftover_length,
            ))
    else:
        # Horizontal cut below the piece first
        below_length = leftover_length - kerf
        if below_length > EPSILON:
            new_rects.append(FreeRectangle(
                x=free_rect.x,
                y=free_rect.y + placed_rect.length + kerf,
                width=free_rect.width,
                length=below_length,
            ))
        if leftover_width > EPSILON:
            new_rects.append(FreeRectangle(
                x=free_rect.x + placed_rect.width,
                y=free_rect.y,
                width=leftover_width,
                length=placed_rect.length,
            ))

    logger.debug(f"Split {free_rect.width:.1f}x{free_rect.length:.1f} after placing "
                 f"{placed_rect.width:.1f}x{placed_rect.length:.1f} -> {len(new_rects)} free rects")
    return new_rects


def prune_free_rectangles(rectangles: Sequence[FreeRectangle]) -> Sequence[FreeRectangle]:
    """
    Remove free rectangles fully contained in another rectangle of the list.
    Adjacent rectangles are not merged.

    Args:
        rectangles: Free rectangles of one board

    Returns:
        The input sequence itself if nothing was removed, otherwise a new tuple of
        the survivors in their original order. Of two identical rectangles the one
        with the lower index survives.
    """
    if len(rectangles) < 2:
        return rectangles

    kept = [True] * len(rectangles)

    for i in range(len(rectangles)):
        if not kept[i]:
            continue
        for j in range(i + 1, len(rectangles)):
            if not kept[j]:
                continue

            i_in_j = contains(rectangles[j], rectangles[i])
            j_in_i = contains(rectangles[i], rectangles[j])

            if i_in_j and j_in_i:
                kept[j] = False
            elif i_in_j:
                kept[i] = False
                break
            elif j_in_i:
                kept[j] = False

    if all(kept):
        return rectangles

    logger.debug(f"Pruned {kept.count(False)} contained free rectangles")
    return tuple(rect for rect, keep in zip(rectangles, kept) if keep)
