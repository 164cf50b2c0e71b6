"""
Helper utility functions for Hidden Maze
"""

import math


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def lerp(a, b, t):
    """Linear interpolation between a and b by factor t (0-1)"""
    return a + (b - a) * t


def chebyshev_distance(x1, y1, x2, y2):
    """Calculate Chebyshev (king-move) distance between two points"""
    return max(abs(x2 - x1), abs(y2 - y1))


def percent(part, total):
    """Rounded percentage, 0 for an empty total"""
    if total <= 0:
        return 0
    return int(math.floor(100.0 * part / total + 0.5))


def format_time(seconds):
    """Format seconds to MM:SS string"""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def mask_to_cells(mask):
    """Convert a boolean (rows, cols) mask into a sorted list of (x, y) tuples"""
    ys, xs = mask.nonzero()
    return sorted((int(x), int(y)) for x, y in zip(xs, ys))


def parse_cell(value):
    """
    Parse a serialized coordinate ([x, y], (x, y) or {"x": .., "y": ..})

    Returns:
        (x, y) tuple of ints

    Raises:
        ValueError: if the value is not a pair of integers
    """
    if isinstance(value, dict):
        value = (value.get('x'), value.get('y'))
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"not a coordinate pair: {value!r}")
    x, y = value
    if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
        raise ValueError(f"coordinate must be integers: {value!r}")
    return x, y
