"""Tests for layout input validation."""

from data_models import BoardDimensions, CutPiece, CutSettings
from validation import (find_oversized_pieces, fits_usable_area, get_usable_dimensions,
                        has_valid_dimensions, validate_inputs)


class TestUsableDimensions:
    def test_trim_removed_from_both_sides(self, standard_board, shop_settings):
        assert get_usable_dimensions(standard_board, shop_settings) == (2430.0, 1210.0)

    def test_no_trim(self, small_board, plain_settings):
        assert get_usable_dimensions(small_board, plain_settings) == (100.0, 100.0)


class TestPieceChecks:
    def test_valid_dimensions(self):
        assert has_valid_dimensions(CutPiece('a', 'A', 10, 20))
        assert not has_valid_dimensions(CutPiece('b', 'B', 0, 20))
        assert not has_valid_dimensions(CutPiece('c', 'C', 10, float('nan')))

    def test_fits_only_when_rotated(self):
        piece = CutPiece('a', 'A', 150, 50)
        assert fits_usable_area(piece, 100, 200, respect_grain=False)

    def test_grain_blocks_rotation(self):
        piece = CutPiece('a', 'A', 150, 50, grain_direction='length')
        assert not fits_usable_area(piece, 100, 200, respect_grain=True)
        assert fits_usable_area(piece, 100, 200, respect_grain=False)

    def test_find_oversized(self, small_board, plain_settings):
        pieces = [CutPiece('ok', 'OK', 50, 50), CutPiece('big', 'Big', 150, 50),
                  CutPiece('bad', 'Bad', -1, 50)]
        oversized = find_oversized_pieces(pieces, small_board, plain_settings)
        assert [p.id for p in oversized] == ['big']


class TestValidateInputs:
    def test_valid_input(self, standard_board, shop_settings, cabinet_pieces):
        errors, warnings = validate_inputs(standard_board, cabinet_pieces, shop_settings)
        assert errors == []
        assert warnings == []

    def test_non_positive_board(self, plain_settings):
        errors, _ = validate_inputs(BoardDimensions(0, 100), [], plain_settings)
        assert "Board dimensions must be positive." in errors

    def test_negative_settings_collected_together(self, small_board):
        settings = CutSettings(kerf_mm=-1, edge_trim_mm=-1, min_scrap_width_mm=-1)
        errors, _ = validate_inputs(small_board, [], settings)
        assert "Kerf cannot be negative." in errors
        assert "Edge trim cannot be negative." in errors
        assert "Minimum scrap dimensions cannot be negative." in errors

    def test_trim_too_large(self, small_board):
        errors, _ = validate_inputs(small_board, [], CutSettings(edge_trim_mm=50))
        assert errors == ["Edge trim (50mm) is too large for board dimensions."]

    def test_oversized_piece_is_warning(self, small_board, plain_settings):
        errors, warnings = validate_inputs(
            small_board, [CutPiece('big', 'Big', 200, 200)], plain_settings)
        assert errors == []
        assert len(warnings) == 1
        assert warnings[0].startswith("Found 1 piece type(s) larger than the usable board area")
        assert "Big" in warnings[0]

    def test_invalid_piece_is_warning(self, small_board, plain_settings):
        errors, warnings = validate_inputs(
            small_board, [CutPiece('zero', 'Zero', 0, 10)], plain_settings)
        assert errors == []
        assert any("non-positive dimensions" in w for w in warnings)

    def test_unknown_algorithm(self, small_board):
        errors, warnings = validate_inputs(small_board, [], CutSettings(optimization_algo='fastest'))
        assert errors == []
        assert warnings == ["Unknown optimization algorithm 'fastest', using 'waste'."]
