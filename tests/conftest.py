"""Shared fixtures for the PlyCut test suite."""

import pytest

from data_models import BoardDimensions, CutPiece, CutSettings, FreeRectangle


@pytest.fixture
def standard_board() -> BoardDimensions:
    """Create a standard 2440x1220 sheet."""
    return BoardDimensions(2440.0, 1220.0)


@pytest.fixture
def small_board() -> BoardDimensions:
    """Create a 100x100 test board."""
    return BoardDimensions(100.0, 100.0)


@pytest.fixture
def plain_settings() -> CutSettings:
    """Settings with no kerf, no trim and no scrap threshold."""
    return CutSettings(kerf_mm=0.0, edge_trim_mm=0.0, min_scrap_width_mm=0.0,
                       min_scrap_length_mm=0.0, respect_grain=False)


@pytest.fixture
def shop_settings() -> CutSettings:
    """Typical workshop settings: 3mm kerf, 5mm trim, grain ignored."""
    return CutSettings(kerf_mm=3.0, edge_trim_mm=5.0, min_scrap_width_mm=50.0,
                       min_scrap_length_mm=50.0, respect_grain=False)


@pytest.fixture
def cabinet_pieces() -> list:
    """A small mixed cut list."""
    return [
        CutPiece('side', 'Side', 560.0, 720.0, quantity=4, grain_direction='length'),
        CutPiece('shelf', 'Shelf', 540.0, 744.0, quantity=3),
        CutPiece('door', 'Door', 396.0, 716.0, quantity=2, grain_direction='length'),
        CutPiece('strip', 'Strip', 80.0, 1100.0, quantity=5),
    ]


@pytest.fixture
def free_rect() -> FreeRectangle:
    """An empty 100x100 free rectangle at the origin."""
    return FreeRectangle(0.0, 0.0, 100.0, 100.0)
