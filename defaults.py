"""Centralized application default values for easier review and tweaks."""

from typing import Tuple

from color_spaces import RgbTuple

# Band defaults
DEFAULT_BAND_COUNT = 10
MIN_BAND_COUNT = 1
# Light green to dark green
DEFAULT_START_RGB: RgbTuple = (218, 251, 225)
DEFAULT_END_RGB: RgbTuple = (10, 36, 27)

# Smoothing defaults
# Stored as the SmoothingAlgorithm enum value for cycle-free import.
DEFAULT_ALGORITHM = "hsl"
DEFAULT_STRENGTH = 1.0
STRENGTH_BOUNDS: Tuple[float, float] = (0.0, 1.0)

# Bezier control points sit on the straight line between the endpoints.
BEZIER_CONTROL_RATIOS: Tuple[float, float] = (0.25, 0.75)

# Substituted for colors that fail to parse inside the engine.
FALLBACK_RGB: RgbTuple = (0, 0, 0)
