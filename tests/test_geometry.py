"""Tests for rectangle helpers."""

from data_models import Rectangle
from geometry import contains, fits, is_degenerate, overlaps


class TestIsDegenerate:
    def test_normal_rectangle(self):
        assert not is_degenerate(Rectangle(0, 0, 10, 10))

    def test_zero_width(self):
        assert is_degenerate(Rectangle(0, 0, 0, 10))

    def test_within_epsilon(self):
        assert is_degenerate(Rectangle(0, 0, 10, 1e-6))

    def test_negative_side(self):
        assert is_degenerate(Rectangle(0, 0, -5, 10))


class TestContains:
    def test_inner_rectangle(self):
        assert contains(Rectangle(0, 0, 100, 100), Rectangle(10, 10, 50, 50))

    def test_same_rectangle(self):
        rect = Rectangle(5, 5, 20, 30)
        assert contains(rect, rect)

    def test_tolerance_on_edges(self):
        assert contains(Rectangle(0, 0, 100, 100), Rectangle(-1e-6, 0, 100 + 1e-6, 100))

    def test_sticking_out(self):
        assert not contains(Rectangle(0, 0, 100, 100), Rectangle(60, 0, 50, 50))


class TestOverlaps:
    def test_overlapping(self):
        assert overlaps(Rectangle(0, 0, 50, 50), Rectangle(25, 25, 50, 50))

    def test_touching_edges_do_not_overlap(self):
        assert not overlaps(Rectangle(0, 0, 50, 50), Rectangle(50, 0, 50, 50))

    def test_disjoint(self):
        assert not overlaps(Rectangle(0, 0, 10, 10), Rectangle(20, 20, 10, 10))


class TestFits:
    def test_exact_fit(self):
        assert fits(100, 100, Rectangle(0, 0, 100, 100))

    def test_too_long(self):
        assert not fits(50, 101, Rectangle(0, 0, 100, 100))
