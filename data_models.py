"""
Core data models for the PlyCut panel layout optimizer.
Defines BoardDimensions, CutPiece, CutSettings, Rectangle, PlacedPiece,
UsableScrap and LayoutResult.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import config


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (external camelCase or snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_bool(value: Any) -> bool:
    """Interpret booleans coming from JSON, forms or spreadsheets ("false", "0", "no")."""
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y', 'on')
    return bool(value)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle on a board, top-left anchored, in millimetres."""
    x: float
    y: float
    width: float
    length: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.length

    @property
    def area(self) -> float:
        return self.width * self.length

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'length': self.length}


# Free space on a board is just a rectangle nobody has claimed yet
FreeRectangle = Rectangle


class BoardDimensions:
    """
    Represents one physical stock sheet. Every board in a run has the same size.
    """

    def __init__(self, width_mm: float, length_mm: float):
        self.width_mm = width_mm
        self.length_mm = length_mm

    @classmethod
    def defaults(cls) -> 'BoardDimensions':
        return cls(config.DEFAULT_BOARD_WIDTH_MM, config.DEFAULT_BOARD_LENGTH_MM)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BoardDimensions':
        return cls(
            width_mm=_pick(data, 'widthMm', 'width_mm', default=0.0),
            length_mm=_pick(data, 'lengthMm', 'length_mm', default=0.0),
        )

    def get_area(self) -> float:
        return self.width_mm * self.length_mm

    def copy(self) -> 'BoardDimensions':
        return BoardDimensions(self.width_mm, self.length_mm)

    def to_dict(self) -> Dict[str, float]:
        return {'widthMm': self.width_mm, 'lengthMm': self.length_mm}

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardDimensions):
            return NotImplemented
        return self.width_mm == other.width_mm and self.length_mm == other.length_mm

    def __str__(self) -> str:
        return f"Board({self.width_mm}x{self.length_mm}mm)"

    def __repr__(self) -> str:
        return self.__str__()


class CutPiece:
    """
    Represents a requested piece type. Quantity expands into that many identical
    instances during optimization.
    """

    def __init__(self, piece_id: str, name: str, width_mm: float, length_mm: float,
                 quantity: int = 1, priority: int = config.MAX_PRIORITY,
                 grain_direction: str = 'none'):
        """
        Initialize a CutPiece.

        Args:
            piece_id: Unique identifier, shared by every expanded instance
            name: Display name
            width_mm, length_mm: Requested dimensions in mm
            quantity: Number of identical pieces needed
            priority: Informational priority (1-5), not used for placement
            grain_direction: 'length', 'width' or 'none'
        """
        self.id = piece_id
        self.name = name
        self.width_mm = width_mm
        self.length_mm = length_mm
        self.quantity = quantity
        self.priority = priority
        self.grain_direction = grain_direction

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CutPiece':
        piece_id = _pick(data, 'id', 'piece_id')
        if piece_id is None:
            piece_id = uuid.uuid4().hex
        return cls(
            piece_id=str(piece_id),
            name=str(_pick(data, 'name', default='')),
            width_mm=_pick(data, 'widthMm', 'width_mm', default=0.0),
            length_mm=_pick(data, 'lengthMm', 'length_mm', default=0.0),
            quantity=_pick(data, 'quantity', default=1),
            priority=_pick(data, 'priority', default=config.MAX_PRIORITY),
            grain_direction=_pick(data, 'grainDirection', 'grain_direction', default='none'),
        )

    @property
    def label(self) -> str:
        return self.name or self.id

    def get_area(self) -> float:
        return self.width_mm * self.length_mm

    def can_rotate(self, respect_grain: bool) -> bool:
        """
        Check if the piece may be turned 90 degrees.

        Args:
            respect_grain: Whether grain direction constraints are enforced

        Returns:
            True unless grain is respected and the piece has a grain direction
        """
        if not respect_grain:
            return True
        return self.grain_direction == 'none'

    def copy_with_quantity(self, quantity: int) -> 'CutPiece':
        return CutPiece(
            piece_id=self.id,
            name=self.name,
            width_mm=self.width_mm,
            length_mm=self.length_mm,
            quantity=quantity,
            priority=self.priority,
            grain_direction=self.grain_direction,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'widthMm': self.width_mm,
            'lengthMm': self.length_mm,
            'quantity': self.quantity,
            'priority': self.priority,
            'grainDirection': self.grain_direction,
        }

    def __str__(self) -> str:
        return f"CutPiece({self.id}, {self.width_mm}x{self.length_mm}, qty={self.quantity})"

    def __repr__(self) -> str:
        return self.__str__()


class CutSettings:
    """
    Cutting parameters applied to the whole run.
    """

    def __init__(self, kerf_mm: float = 0.0, edge_trim_mm: float = 0.0,
                 min_scrap_width_mm: float = 0.0, min_scrap_length_mm: float = 0.0,
                 respect_grain: bool = True, optimization_algo: str = 'waste'):
        """
        Initialize CutSettings.

        Args:
            kerf_mm: Blade width consumed by each cut
            edge_trim_mm: Margin removed from all four board edges before packing
            min_scrap_width_mm, min_scrap_length_mm: Smallest leftover worth reporting
            respect_grain: If True, grain-directed pieces are never rotated
            optimization_algo: 'waste', 'cuts' or 'priority'; echoed, does not change scoring
        """
        self.kerf_mm = kerf_mm
        self.edge_trim_mm = edge_trim_mm
        self.min_scrap_width_mm = min_scrap_width_mm
        self.min_scrap_length_mm = min_scrap_length_mm
        self.respect_grain = respect_grain
        self.optimization_algo = optimization_algo

    @classmethod
    def defaults(cls) -> 'CutSettings':
        return cls(**config.DEFAULT_SETTINGS)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CutSettings':
        defaults = config.DEFAULT_SETTINGS
        return cls(
            kerf_mm=_pick(data, 'kerfMm', 'kerf_mm', default=defaults['kerf_mm']),
            edge_trim_mm=_pick(data, 'edgeTrimMm', 'edge_trim_mm', default=defaults['edge_trim_mm']),
            min_scrap_width_mm=_pick(data, 'minScrapWidthMm', 'min_scrap_width_mm',
                                     default=defaults['min_scrap_width_mm']),
            min_scrap_length_mm=_pick(data, 'minScrapLengthMm', 'min_scrap_length_mm',
                                      default=defaults['min_scrap_length_mm']),
            respect_grain=_to_bool(_pick(data, 'respectGrain', 'respect_grain',
                                         default=defaults['respect_grain'])),
            optimization_algo=_pick(data, 'optimizationAlgo', 'optimization_algo',
                                    default=defaults['optimization_algo']),
        )

    def copy(self) -> 'CutSettings':
        return CutSettings(
            kerf_mm=self.kerf_mm,
            edge_trim_mm=self.edge_trim_mm,
            min_scrap_width_mm=self.min_scrap_width_mm,
            min_scrap_length_mm=self.min_scrap_length_mm,
            respect_grain=self.respect_grain,
            optimization_algo=self.optimization_algo,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kerfMm': self.kerf_mm,
            'edgeTrimMm': self.edge_trim_mm,
            'minScrapWidthMm': self.min_scrap_width_mm,
            'minScrapLengthMm': self.min_scrap_length_mm,
            'respectGrain': self.respect_grain,
            'optimizationAlgo': self.optimization_algo,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, CutSettings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"CutSettings({self.to_dict()})"


@dataclass(frozen=True)
class PlacedPiece:
    """A piece instance placed on a board. Dimensions are as placed (post-rotation)."""
    id: str
    name: str
    board_index: int
    is_rotated: bool
    placed_width_mm: float
    placed_length_mm: float
    x: float
    y: float

    @property
    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.placed_width_mm, self.placed_length_mm)

    @property
    def area(self) -> float:
        return self.placed_width_mm * self.placed_length_mm

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'boardIndex': self.board_index,
            'isRotated': self.is_rotated,
            'placedWidthMm': self.placed_width_mm,
            'placedLengthMm': self.placed_length_mm,
            'x': self.x,
            'y': self.y,
        }


@dataclass(frozen=True)
class UsableScrap:
    """Leftover free rectangle large enough to be kept for later use."""
    x: float
    y: float
    width: float
    length: float
    board_index: int
    area_mm2: float

    @property
    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.length)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'length': self.length,
            'boardIndex': self.board_index,
            'areaMm2': self.area_mm2,
        }


class LayoutResult:
    """
    Everything a layout run produces. Always returned by the optimizer, even when
    validation fails; problems are reported in errors and warnings.
    """

    def __init__(self, placed_pieces: List[PlacedPiece], unplaced_pieces: List[CutPiece],
                 boards_used: int, board_dimensions: BoardDimensions, settings_used: CutSettings,
                 total_pieces_area_mm2: float, total_placed_piece_area_mm2: float,
                 total_boards_area_mm2: float, waste_percentage: float,
                 usable_scrap: List[UsableScrap], processing_time_ms: Optional[float] = None,
                 errors: Optional[List[str]] = None, warnings: Optional[List[str]] = None):
        self.placed_pieces = placed_pieces
        self.unplaced_pieces = unplaced_pieces
        self.boards_used = boards_used
        self.board_dimensions = board_dimensions
        self.settings_used = settings_used
        self.total_pieces_area_mm2 = total_pieces_area_mm2
        self.total_placed_piece_area_mm2 = total_placed_piece_area_mm2
        self.total_boards_area_mm2 = total_boards_area_mm2
        self.waste_percentage = waste_percentage
        self.usable_scrap = usable_scrap
        self.processing_time_ms = processing_time_ms
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def success(self) -> bool:
        return not self.errors and not self.unplaced_pieces

    def pieces_on_board(self, board_index: int) -> List[PlacedPiece]:
        return [p for p in self.placed_pieces if p.board_index == board_index]

    def board_utilization_percentage(self, board_index: int) -> float:
        """
        Calculate the percentage of one board covered by placed pieces.

        Args:
            board_index: 0-based board index

        Returns:
            Utilization percentage (0-100)
        """
        board_area = self.board_dimensions.get_area()
        if board_area <= 0:
            return 0.0
        used_area = sum(p.area for p in self.pieces_on_board(board_index))
        return used_area / board_area * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'placedPieces': [p.to_dict() for p in self.placed_pieces],
            'unplacedPieces': [p.to_dict() for p in self.unplaced_pieces],
            'boardsUsed': self.boards_used,
            'boardDimensions': self.board_dimensions.to_dict(),
            'settingsUsed': self.settings_used.to_dict(),
            'totalPiecesAreaMm2': self.total_pieces_area_mm2,
            'totalPlacedPieceAreaMm2': self.total_placed_piece_area_mm2,
            'totalBoardsAreaMm2': self.total_boards_area_mm2,
            'wastePercentage': self.waste_percentage,
            'usableScrap': [s.to_dict() for s in self.usable_scrap],
            'processingTimeMs': self.processing_time_ms,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
        }

    def __str__(self) -> str:
        return (f"LayoutResult({len(self.placed_pieces)} placed, "
                f"{len(self.unplaced_pieces)} unplaced types, {self.boards_used} boards, "
                f"waste {self.waste_percentage:.1f}%)")

    def __repr__(self) -> str:
        return self.__str__()
