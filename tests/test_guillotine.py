"""Tests for guillotine splitting and free rectangle pruning."""

import pytest

from data_models import FreeRectangle, Rectangle
from geometry import contains, overlaps
from guillotine import prune_free_rectangles, split_free_rectangle


class TestSplitFreeRectangle:
    def test_vertical_cut_first_when_width_leftover_smaller(self, free_rect):
        rects = split_free_rectangle(free_rect, Rectangle(0, 0, 60, 60), kerf=0)
        assert rects == [FreeRectangle(60, 0, 40, 100), FreeRectangle(0, 60, 60, 40)]

    def test_horizontal_cut_first_when_length_leftover_smaller(self):
        free = FreeRectangle(0, 0, 200, 100)
        rects = split_free_rectangle(free, Rectangle(0, 0, 50, 80), kerf=0)
        assert rects == [FreeRectangle(0, 80, 200, 20), FreeRectangle(50, 0, 150, 80)]

    def test_kerf_only_on_primary_cut(self, free_rect):
        rects = split_free_rectangle(free_rect, Rectangle(0, 0, 60, 60), kerf=3)
        assert rects == [FreeRectangle(63, 0, 37, 100), FreeRectangle(0, 60, 60, 40)]

    def test_kerf_consumes_thin_leftover(self, free_rect):
        rects = split_free_rectangle(free_rect, Rectangle(0, 0, 98, 60), kerf=3)
        assert rects == [FreeRectangle(0, 60, 98, 40)]

    def test_exact_fit_leaves_nothing(self, free_rect):
        assert split_free_rectangle(free_rect, Rectangle(0, 0, 100, 100), kerf=3) == []

    def test_full_width_piece(self, free_rect):
        rects = split_free_rectangle(free_rect, Rectangle(0, 0, 100, 30), kerf=0)
        assert rects == [FreeRectangle(0, 30, 100, 70)]

    def test_pieces_stay_disjoint_from_new_space(self):
        free = FreeRectangle(5, 5, 2430, 1210)
        placed = Rectangle(5, 5, 600, 1200)
        for rect in split_free_rectangle(free, placed, kerf=3):
            assert contains(free, rect)
            assert not overlaps(rect, placed)

    @pytest.mark.parametrize("placed", [
        Rectangle(0, 0, 0, 50),
        Rectangle(0, 0, 150, 50),
        Rectangle(60, 60, 50, 50),
    ])
    def test_invalid_placement_returns_empty(self, free_rect, placed):
        assert split_free_rectangle(free_rect, placed, kerf=0) == []


class TestPruneFreeRectangles:
    def test_nothing_removed_returns_same_object(self):
        rects = (FreeRectangle(0, 0, 10, 10), FreeRectangle(20, 0, 10, 10))
        assert prune_free_rectangles(rects) is rects

    def test_contained_rectangle_removed(self):
        big = FreeRectangle(0, 0, 100, 100)
        small = FreeRectangle(10, 10, 20, 20)
        assert prune_free_rectangles((small, big)) == (big,)

    def test_duplicates_keep_first(self):
        first = FreeRectangle(0, 0, 50, 50)
        second = FreeRectangle(0, 0, 50, 50)
        other = FreeRectangle(60, 0, 10, 10)
        assert prune_free_rectangles([first, other, second]) == (first, other)

    def test_order_preserved(self):
        a = FreeRectangle(0, 0, 10, 10)
        b = FreeRectangle(100, 0, 50, 50)
        c = FreeRectangle(110, 10, 5, 5)
        d = FreeRectangle(0, 100, 10, 10)
        assert prune_free_rectangles([a, b, c, d]) == (a, b, d)

    def test_adjacent_rectangles_not_merged(self):
        rects = [FreeRectangle(0, 0, 50, 100), FreeRectangle(50, 0, 50, 100)]
        assert prune_free_rectangles(rects) is rects

    def test_short_lists(self):
        empty = ()
        assert prune_free_rectangles(empty) is empty
