"""
Configuration and constants for the PlyCut panel layout optimizer.
"""

import os

# Tolerance for floating point comparisons on millimetre geometry
EPSILON = 1e-5

INCHES_TO_MM = 25.4

DEFAULT_BOARD_WIDTH_MM = 2440.0
DEFAULT_BOARD_LENGTH_MM = 1220.0
DEFAULT_BOARD_THICKNESS_MM = 18.0

DEFAULT_SETTINGS = {
    'kerf_mm': 3.0,
    'edge_trim_mm': 5.0,
    'min_scrap_width_mm': 50.0,
    'min_scrap_length_mm': 50.0,
    'respect_grain': True,
    'optimization_algo': 'waste',
}

GRAIN_DIRECTIONS = ('length', 'width', 'none')
OPTIMIZATION_ALGORITHMS = ('waste', 'cuts', 'priority')

MIN_PRIORITY = 1
MAX_PRIORITY = 5

LOG_LEVEL = os.environ.get('PLYCUT_LOG_LEVEL', 'INFO')
