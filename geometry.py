"""
Rectangle arithmetic with epsilon tolerance.
"""

from config import EPSILON
from data_models import Rectangle


def is_degenerate(rect: Rectangle, epsilon: float = EPSILON) -> bool:
    """True if either side is effectively zero (or negative)."""
    return rect.width <= epsilon or rect.length <= epsilon


def contains(outer: Rectangle, inner: Rectangle, epsilon: float = EPSILON) -> bool:
    """
    Check whether inner lies fully inside outer.

    Args:
        outer: Enclosing rectangle
        inner: Rectangle to test
        epsilon: Tolerance applied on every edge

    Returns:
        True if inner is contained in outer within epsilon
    """
    return (inner.x >= outer.x - epsilon and
            inner.y >= outer.y - epsilon and
            inner.right <= outer.right + epsilon and
            inner.bottom <= outer.bottom + epsilon)


def overlaps(a: Rectangle, b: Rectangle, epsilon: float = EPSILON) -> bool:
    """True if the interiors of a and b intersect. Touching edges do not count."""
    return (a.x < b.right - epsilon and
            b.x < a.right - epsilon and
            a.y < b.bottom - epsilon and
            b.y < a.bottom - epsilon)


def fits(width: float, length: float, rect: Rectangle) -> bool:
    """True if a width x length piece fits inside rect without rotation."""
    return width <= rect.width and length <= rect.length
