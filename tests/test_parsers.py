"""Tests for cut list parsing."""

import io

import pandas as pd
import pytest

from optimization_core import expand_piece_instances
from parsers import CutListError, build_piece, load_cut_list, normalize_grain


def write_csv(tmp_path, text, name="cut_list.csv"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


class TestNormalizeGrain:
    @pytest.mark.parametrize("value, expected", [
        ('length', 'length'),
        (' Width ', 'width'),
        ('NONE', 'none'),
        ('yes', 'length'),
        (1, 'length'),
        (None, 'none'),
        ('', 'none'),
        (float('nan'), 'none'),
        ('diagonal', 'none'),
    ])
    def test_values(self, value, expected):
        assert normalize_grain(value) == expected


class TestBuildPiece:
    def test_defaults(self):
        piece = build_piece(560, 720)
        assert piece.width_mm == 560.0
        assert piece.length_mm == 720.0
        assert piece.quantity == 1
        assert piece.priority == 5
        assert piece.grain_direction == 'none'
        assert piece.name == "Piece 560x720"
        assert piece.id

    def test_inches_converted(self):
        piece = build_piece(10, 20, units='inches')
        assert piece.width_mm == pytest.approx(254.0)
        assert piece.length_mm == pytest.approx(508.0)

    def test_quantity_and_priority_normalized(self):
        piece = build_piece(10, 10, quantity=0, priority=9)
        assert piece.quantity == 1
        assert piece.priority == 5
        assert build_piece(10, 10, priority=0).priority == 1
        assert build_piece(10, 10, quantity='3').quantity == 3

    def test_half_rounds_up(self):
        assert build_piece(100, 200, quantity=2.5).quantity == 3
        assert build_piece(100, 200, priority=2.5).priority == 3
        assert build_piece(100, 200, quantity=1.49).quantity == 1

    def test_infinite_quantity_and_priority(self):
        piece = build_piece(100, 200, quantity=float('inf'), priority=float('-inf'))
        assert piece.quantity == 1
        assert piece.priority == 5

    def test_explicit_id(self):
        assert build_piece(10, 10, piece_id='door-1').id == 'door-1'

    @pytest.mark.parametrize("width, length", [(0, 10), (-5, 10), (10, float('inf')), ('abc', 10)])
    def test_invalid_dimensions(self, width, length):
        with pytest.raises(ValueError):
            build_piece(width, length)


class TestLoadCutList:
    def test_full_csv(self, tmp_path):
        path = write_csv(tmp_path, (
            "Name,Width,Length,Quantity,Priority,Grain\n"
            "Side,560,720,4,1,length\n"
            "Shelf,540,744,2,3,\n"
        ))
        pieces = load_cut_list(path)
        assert [p.name for p in pieces] == ['Side', 'Shelf']
        assert pieces[0].quantity == 4
        assert pieces[0].priority == 1
        assert pieces[0].grain_direction == 'length'
        assert pieces[1].grain_direction == 'none'

    def test_header_aliases_and_case(self, tmp_path):
        path = write_csv(tmp_path, "WIDTH,length,Qty,Piece ID\n100,200,3,a1\n")
        pieces = load_cut_list(path)
        assert len(pieces) == 1
        assert pieces[0].id == 'a1'
        assert pieces[0].quantity == 3

    def test_bad_rows_skipped(self, tmp_path):
        path = write_csv(tmp_path, (
            "Name,Width,Length\n"
            "Good,100,200\n"
            "Missing,,200\n"
            "Text,abc,200\n"
            "Negative,-10,200\n"
            ",,\n"
            "Also good,50,60\n"
        ))
        pieces = load_cut_list(path)
        assert [p.name for p in pieces] == ['Good', 'Also good']

    def test_infinite_quantity_does_not_escape(self, tmp_path):
        path = write_csv(tmp_path, "Name,Width,Length,Quantity\nA,100,200,inf\nB,100,200,2\n")
        pieces = load_cut_list(path)
        assert [(p.name, p.quantity) for p in pieces] == [('A', 1), ('B', 2)]

    def test_half_quantity_matches_optimizer(self, tmp_path):
        path = write_csv(tmp_path, "Width,Length,Quantity\n100,200,2.5\n")
        pieces = load_cut_list(path)
        assert pieces[0].quantity == 3
        assert len(expand_piece_instances(pieces)) == 3

    def test_inches(self, tmp_path):
        path = write_csv(tmp_path, "Width,Length\n24,48\n")
        piece = load_cut_list(path, units='inches')[0]
        assert piece.width_mm == pytest.approx(609.6)
        assert piece.length_mm == pytest.approx(1219.2)

    def test_file_like_object(self):
        pieces = load_cut_list(io.StringIO("Width,Length,Quantity\n100,200,2\n"))
        assert pieces[0].quantity == 2

    def test_excel(self, tmp_path):
        path = tmp_path / "cut_list.xlsx"
        pd.DataFrame({'Name': ['Door'], 'Width': [396], 'Length': [716], 'Grain': ['length']}) \
            .to_excel(path, index=False)
        pieces = load_cut_list(str(path))
        assert len(pieces) == 1
        assert pieces[0].name == 'Door'
        assert pieces[0].grain_direction == 'length'

    def test_missing_required_column(self, tmp_path):
        path = write_csv(tmp_path, "Name,Width\nSide,560\n")
        with pytest.raises(CutListError, match="Missing required columns"):
            load_cut_list(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_cut_list(str(tmp_path / "nope.csv"))

    def test_unreadable_file(self, tmp_path):
        path = write_csv(tmp_path, "")
        with pytest.raises(CutListError, match="Could not read cut list"):
            load_cut_list(path)

    def test_cut_list_error_is_value_error(self):
        assert issubclass(CutListError, ValueError)
