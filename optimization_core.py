"""
Layout optimization core: piece expansion, multi-board allocation and the
calculate_layout entry point.

Pieces are placed greedily, largest first, with Best Short Side Fit placement and
Split Longer Leftover Axis guillotine splitting. Boards are opened only when a
piece fits nowhere on the boards already in use.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple, Union

from data_models import (BoardDimensions, CutPiece, CutSettings, FreeRectangle, LayoutResult,
                         PlacedPiece)
from geometry import contains
from guillotine import prune_free_rectangles, split_free_rectangle
from layout_stats import calculate_requested_area, calculate_statistics, find_usable_scrap
from placement import PlacementCandidate, find_best_placement
from validation import get_usable_dimensions, has_valid_dimensions, validate_inputs

logger = logging.getLogger(__name__)


class LayoutEvent(NamedTuple):
    """Progress notification sent to an optional observer during a run."""
    kind: str
    message: str
    details: Dict[str, Any]


EventCallback = Callable[[LayoutEvent], None]

EVENT_STARTED = 'started'
EVENT_VALIDATION_FAILED = 'validation_failed'
EVENT_BOARD_OPENED = 'board_opened'
EVENT_PIECE_PLACED = 'piece_placed'
EVENT_PIECE_UNPLACED = 'piece_unplaced'
EVENT_INVARIANT_VIOLATION = 'invariant_violation'
EVENT_FINISHED = 'finished'


@dataclass(frozen=True)
class BoardState:
    """Free space of one board. Replaced wholesale, never mutated."""
    index: int
    free_rectangles: Tuple[FreeRectangle, ...] = field(default_factory=tuple)

    def with_free_rectangles(self, free_rectangles: Sequence[FreeRectangle]) -> 'BoardState':
        return BoardState(self.index, tuple(free_rectangles))


def _instance_count(quantity) -> int:
    try:
        return max(0, int(math.floor(float(quantity) + 0.5)))
    except (TypeError, ValueError, OverflowError):
        return 0


def expand_piece_instances(pieces: Sequence[CutPiece]) -> List[CutPiece]:
    """
    Expand piece types into unit instances in placement order.

    Each piece with quantity n becomes n copies with quantity 1 and the original id.
    Instances are ordered by length descending, then width descending; ties keep
    input order. Pieces with non-positive dimensions produce no instances.

    Args:
        pieces: Requested piece types

    Returns:
        Ordered list of piece instances
    """
    instances = []
    for piece in pieces:
        if not has_valid_dimensions(piece):
            continue
        count = _instance_count(piece.quantity)
        instances.extend(piece.copy_with_quantity(1) for _ in range(count))

    instances.sort(key=lambda p: (-p.length_mm, -p.width_mm))
    return instances


class BoardAllocator:
    """
    Places piece instances one by one across a growing list of identical boards.
    """

    def __init__(self, board: BoardDimensions, settings: CutSettings,
                 emit: Callable[..., None]):
        self.settings = settings
        self.emit = emit
        self.boards: List[BoardState] = []
        self.placed_pieces: List[PlacedPiece] = []
        self.unplaced_ids: Set[str] = set()
        self.warnings: List[str] = []

        usable_width, usable_length = get_usable_dimensions(board, settings)
        if usable_width > 0 and usable_length > 0:
            self.usable_rect: Optional[FreeRectangle] = FreeRectangle(
                x=settings.edge_trim_mm, y=settings.edge_trim_mm,
                width=usable_width, length=usable_length,
            )
        else:
            self.usable_rect = None
            self.warnings.append("No usable area on board after edge trim.")

    def allocate(self, instances: Sequence[CutPiece]) -> None:
        for piece in instances:
            if not self.place(piece):
                self.mark_unplaced(piece)

    def mark_unplaced(self, piece: CutPiece) -> None:
        self.unplaced_ids.add(piece.id)
        logger.info(f"Failed to place piece instance {piece.label} "
                    f"({piece.width_mm}x{piece.length_mm})")
        self.emit(EVENT_PIECE_UNPLACED, f"Could not place {piece.label}", piece_id=piece.id)

    def place(self, piece: CutPiece) -> bool:
        """
        Place one piece instance, opening a new board if necessary.

        Returns:
            True if the piece was placed
        """
        for board in self.boards:
            candidate = find_best_placement(piece, board.free_rectangles, self.settings)
            if candidate is not None:
                return self._commit(piece, board, candidate)

        if self.usable_rect is None:
            return False

        # Nothing opens a board for a piece that could never fit an empty one
        if find_best_placement(piece, (self.usable_rect,), self.settings) is None:
            return False

        new_board = BoardState(index=len(self.boards), free_rectangles=(self.usable_rect,))
        candidate = find_best_placement(piece, new_board.free_rectangles, self.settings)
        if candidate is None:
            self._invariant_violation(
                f"Placement logic error for piece {piece.label} on new board.", piece)
            return False

        return self._commit(piece, new_board, candidate, opens_board=True)

    def _commit(self, piece: CutPiece, board: BoardState, candidate: PlacementCandidate,
                opens_board: bool = False) -> bool:
        used_rect = board.free_rectangles[candidate.node_index]
        placement_rect = candidate.placement_rect

        if not contains(used_rect, placement_rect):
            self._invariant_violation(
                f"Placement of piece {piece.label} falls outside its free rectangle.", piece)
            return False

        # A new board only joins the run once something is placed on it
        if opens_board:
            self.boards.append(board)
            logger.info(f"Piece {piece.label} didn't fit on {board.index} board(s), "
                        f"adding new board {board.index}")
            self.emit(EVENT_BOARD_OPENED, f"Opened board {board.index}", board_index=board.index)

        self.placed_pieces.append(PlacedPiece(
            id=piece.id,
            name=piece.name,
            board_index=board.index,
            is_rotated=candidate.is_rotated,
            placed_width_mm=placement_rect.width,
            placed_length_mm=placement_rect.length,
            x=placement_rect.x,
            y=placement_rect.y,
        ))

        remaining = (board.free_rectangles[:candidate.node_index] +
                     board.free_rectangles[candidate.node_index + 1:])
        new_rects = split_free_rectangle(used_rect, placement_rect, self.settings.kerf_mm)
        pruned = prune_free_rectangles(remaining + tuple(new_rects))
        self.boards[board.index] = board.with_free_rectangles(pruned)

        self.emit(EVENT_PIECE_PLACED, f"Placed {piece.label} on board {board.index}",
                  piece_id=piece.id, board_index=board.index, x=placement_rect.x,
                  y=placement_rect.y, is_rotated=candidate.is_rotated)
        return True

    def _invariant_violation(self, message: str, piece: CutPiece) -> None:
        logger.error(message)
        self.warnings.append(message)
        self.emit(EVENT_INVARIANT_VIOLATION, message, piece_id=piece.id)


def _make_emitter(on_event: Optional[EventCallback]) -> Callable[..., None]:
    def emit(kind: str, message: str, **details) -> None:
        if on_event is None:
            return
        try:
            on_event(LayoutEvent(kind, message, details))
        except Exception as e:
            logger.warning(f"Layout event observer failed on '{kind}': {e}")
    return emit


def _error_result(board: BoardDimensions, pieces: Sequence[CutPiece], settings: CutSettings,
                  errors: List[str], warnings: List[str], start_time: float) -> LayoutResult:
    try:
        requested_area = calculate_requested_area(pieces)
    except Exception as e:
        logger.error(f"Could not calculate requested area: {e}")
        requested_area = 0.0

    return LayoutResult(
        placed_pieces=[],
        unplaced_pieces=list(pieces),
        boards_used=0,
        board_dimensions=board,
        settings_used=settings,
        total_pieces_area_mm2=requested_area,
        total_placed_piece_area_mm2=0.0,
        total_boards_area_mm2=0.0,
        waste_percentage=100.0,
        usable_scrap=[],
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
        errors=errors,
        warnings=warnings,
    )


def calculate_layout(board: Union[BoardDimensions, Mapping[str, Any]],
                     pieces: Sequence[Union[CutPiece, Mapping[str, Any]]],
                     settings: Union[CutSettings, Mapping[str, Any]],
                     on_event: Optional[EventCallback] = None) -> LayoutResult:
    """
    Calculate a cutting layout for the requested pieces on identical stock boards.

    Never raises: validation problems and unexpected failures are reported through
    the errors and warnings of the returned result.

    Args:
        board: Stock board dimensions (model or dict with widthMm/lengthMm)
        pieces: Requested piece types (models or dicts)
        settings: Cut settings (model or dict)
        on_event: Optional observer notified of progress events

    Returns:
        LayoutResult with placements, unplaced piece types, statistics and scrap
    """
    start_time = time.perf_counter()
    emit = _make_emitter(on_event)

    try:
        if not isinstance(board, BoardDimensions):
            board = BoardDimensions.from_dict(board)
        if not isinstance(settings, CutSettings):
            settings = CutSettings.from_dict(settings)
        pieces = [p if isinstance(p, CutPiece) else CutPiece.from_dict(p) for p in pieces]
    except Exception as e:
        logger.exception(f"Could not read layout input: {e}")
        return _error_result(BoardDimensions(0.0, 0.0), [], CutSettings(),
                             [f"Invalid layout input: {e}"], [], start_time)

    board = board.copy()
    settings = settings.copy()

    try:
        logger.info(f"Starting layout calculation: board {board}, {len(pieces)} piece types, "
                    f"settings {settings.to_dict()}")
        emit(EVENT_STARTED, "Starting layout calculation", piece_types=len(pieces))

        errors, warnings = validate_inputs(board, pieces, settings)
        if errors:
            emit(EVENT_VALIDATION_FAILED, "Input validation failed", errors=list(errors))
            return _error_result(board, pieces, settings, errors, warnings, start_time)

        instances = expand_piece_instances(pieces)
        logger.info(f"Prepared {len(instances)} total piece instances for placement")

        allocator = BoardAllocator(board, settings, emit)
        for piece in pieces:
            if not has_valid_dimensions(piece) and _instance_count(piece.quantity) > 0:
                allocator.unplaced_ids.add(piece.id)
        allocator.allocate(instances)
        warnings.extend(allocator.warnings)

        stats = calculate_statistics(pieces, allocator.placed_pieces, len(allocator.boards), board)
        usable_scrap = find_usable_scrap(
            ((b.index, b.free_rectangles) for b in allocator.boards), settings)

        result = LayoutResult(
            placed_pieces=allocator.placed_pieces,
            unplaced_pieces=[p for p in pieces if p.id in allocator.unplaced_ids],
            boards_used=stats['boards_used'],
            board_dimensions=board,
            settings_used=settings,
            total_pieces_area_mm2=stats['total_pieces_area_mm2'],
            total_placed_piece_area_mm2=stats['total_placed_piece_area_mm2'],
            total_boards_area_mm2=stats['total_boards_area_mm2'],
            waste_percentage=stats['waste_percentage'],
            usable_scrap=usable_scrap,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
            errors=errors,
            warnings=warnings,
        )
    except Exception as e:
        logger.exception(f"Layout calculation failed: {e}")
        return _error_result(board, pieces, settings, [f"Layout calculation failed: {e}"], [],
                             start_time)

    logger.info(f"Layout calculation finished in {result.processing_time_ms:.1f}ms: "
                f"{len(result.placed_pieces)} pieces placed, "
                f"{len(result.unplaced_pieces)} piece types unplaced, "
                f"{result.boards_used} boards used, waste {result.waste_percentage:.1f}%")
    emit(EVENT_FINISHED, "Layout calculation finished", boards_used=result.boards_used,
         placed=len(result.placed_pieces), unplaced=len(result.unplaced_pieces))
    return result


def calculate_layout_from_input(data: Mapping[str, Any],
                                on_event: Optional[EventCallback] = None) -> LayoutResult:
    """
    Run calculate_layout on a single {board, pieces, settings} mapping.
    """
    return calculate_layout(
        board=data.get('board') or {},
        pieces=data.get('pieces') or [],
        settings=data.get('settings') or {},
        on_event=on_event,
    )
