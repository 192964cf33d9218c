"""Segment-wise smoothing of color band sequences.

A band sequence is an ordered list of ``#rrggbb`` colors. Locked indices,
together with the first and last index, act as anchors: the sequence is split
into segments between consecutive anchors and the interior of each segment is
rewritten by one of the interpolation algorithms below. The smoothed sequence
is then blended back against the original by a strength factor.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from color_spaces import (
    HslColor,
    RgbFloat,
    RgbTuple,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    lab_to_rgb,
    normalize_hue,
    rgb_to_hex,
    rgb_to_lab,
)
from defaults import (
    BEZIER_CONTROL_RATIOS,
    DEFAULT_ALGORITHM,
    DEFAULT_BAND_COUNT,
    DEFAULT_END_RGB,
    DEFAULT_START_RGB,
    DEFAULT_STRENGTH,
    FALLBACK_RGB,
    MIN_BAND_COUNT,
    STRENGTH_BOUNDS,
)

log = logging.getLogger(__name__)

Interpolator = Callable[[Sequence[str], Iterable[int]], List[str]]


class SmoothingAlgorithm(str, Enum):
    RGB = "rgb"
    HSL = "hsl"
    LAB = "lab"
    BEZIER = "bezier"


ALGORITHM_DESCRIPTIONS = {
    SmoothingAlgorithm.HSL: "Interpolates between colors maintaining hue relationships for natural gradients.",
    SmoothingAlgorithm.LAB: "Uses perceptually uniform LAB color space for smooth visual transitions.",
    SmoothingAlgorithm.RGB: "Simple linear blending between red, green, and blue values.",
    SmoothingAlgorithm.BEZIER: "Creates smooth curves through color space using control points.",
}


@dataclass(frozen=True)
class Segment:
    """Inclusive run of indices between two consecutive anchors."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def indices(self) -> range:
        return range(self.start, self.end + 1)

    @property
    def interior(self) -> range:
        return range(self.start + 1, self.end)

    def factor(self, index: int) -> float:
        return (index - self.start) / (self.end - self.start)


def parse_algorithm(value: object) -> Optional[SmoothingAlgorithm]:
    if isinstance(value, SmoothingAlgorithm):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SmoothingAlgorithm(value.strip().lower())
    except ValueError:
        return None


def _lerp(start: float, end: float, factor: float) -> float:
    return start + (end - start) * factor


def lerp_channels(
    start: Tuple[float, float, float], end: Tuple[float, float, float], factor: float
) -> Tuple[float, float, float]:
    return (
        _lerp(start[0], end[0], factor),
        _lerp(start[1], end[1], factor),
        _lerp(start[2], end[2], factor),
    )


def _rgb_or_fallback(hex_color: str) -> RgbTuple:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        log.warning("Invalid color %r treated as %s", hex_color, FALLBACK_RGB)
        return FALLBACK_RGB
    return rgb


def _hsl_or_fallback(hex_color: str) -> HslColor:
    hsl = hex_to_hsl(hex_color)
    if hsl is None:
        log.warning("Invalid color %r treated as h=s=l=0", hex_color)
        return (0.0, 0.0, 0.0)
    return hsl


# --- Segmentation ----------------------------------------------------------

def _validated_locks(locked: Iterable[int], total_length: int) -> Set[int]:
    locks = set(locked)
    out_of_range = sorted(i for i in locks if not 0 <= i < total_length)
    if out_of_range:
        raise ValueError(
            f"Locked indices {out_of_range} outside sequence of length {total_length}"
        )
    return locks


def find_anchors(locked: Iterable[int], total_length: int) -> List[int]:
    """Sorted, de-duplicated anchors; the first and last index are implicit."""
    locks = _validated_locks(locked, total_length)
    if total_length < 1:
        return []
    return sorted(locks | {0, total_length - 1})


def find_segments(locked: Iterable[int], total_length: int) -> List[Segment]:
    anchors = find_anchors(locked, total_length)
    return [
        Segment(start=a, end=b) for a, b in zip(anchors, anchors[1:]) if b > a
    ]


def _segments_with_interior(
    colors: Sequence[str], locked: Iterable[int]
) -> List[Segment]:
    return [s for s in find_segments(locked, len(colors)) if s.length > 2]


# --- Interpolation algorithms ----------------------------------------------

def rgb_linear_interpolate(
    colors: Sequence[str], locked: Iterable[int] = ()
) -> List[str]:
    smoothed = list(colors)
    for segment in _segments_with_interior(colors, locked):
        start = _rgb_or_fallback(colors[segment.start])
        end = _rgb_or_fallback(colors[segment.end])
        for index in segment.interior:
            rgb = lerp_channels(start, end, segment.factor(index))
            smoothed[index] = rgb_to_hex(rgb)
    return smoothed


def hsl_interpolate(colors: Sequence[str], locked: Iterable[int] = ()) -> List[str]:
    smoothed = list(colors)
    for segment in _segments_with_interior(colors, locked):
        start_h, start_s, start_l = _hsl_or_fallback(colors[segment.start])
        end_h, end_s, end_l = _hsl_or_fallback(colors[segment.end])

        # Take the shorter way around the hue circle.
        hue_diff = end_h - start_h
        if hue_diff > 180:
            end_h -= 360
        elif hue_diff < -180:
            end_h += 360

        for index in segment.interior:
            factor = segment.factor(index)
            hsl = (
                normalize_hue(_lerp(start_h, end_h, factor)),
                _lerp(start_s, end_s, factor),
                _lerp(start_l, end_l, factor),
            )
            smoothed[index] = hsl_to_hex(hsl)
    return smoothed


def lab_interpolate(colors: Sequence[str], locked: Iterable[int] = ()) -> List[str]:
    smoothed = list(colors)
    for segment in _segments_with_interior(colors, locked):
        start = rgb_to_lab(_rgb_or_fallback(colors[segment.start]))
        end = rgb_to_lab(_rgb_or_fallback(colors[segment.end]))
        for index in segment.interior:
            lab = lerp_channels(start, end, segment.factor(index))
            smoothed[index] = rgb_to_hex(lab_to_rgb(lab))
    return smoothed


def cubic_bezier(
    p0: RgbFloat, p1: RgbFloat, p2: RgbFloat, p3: RgbFloat, t: float
) -> RgbFloat:
    u = 1 - t
    w0 = u * u * u
    w1 = 3 * u * u * t
    w2 = 3 * u * t * t
    w3 = t * t * t
    return tuple(
        w0 * p0[i] + w1 * p1[i] + w2 * p2[i] + w3 * p3[i] for i in range(3)
    )


def bezier_interpolate(
    colors: Sequence[str], locked: Iterable[int] = ()
) -> List[str]:
    smoothed = list(colors)
    near_ratio, far_ratio = BEZIER_CONTROL_RATIOS
    for segment in _segments_with_interior(colors, locked):
        p0 = _rgb_or_fallback(colors[segment.start])
        p3 = _rgb_or_fallback(colors[segment.end])
        p1 = lerp_channels(p0, p3, near_ratio)
        p2 = lerp_channels(p0, p3, far_ratio)
        for index in segment.interior:
            rgb = cubic_bezier(p0, p1, p2, p3, segment.factor(index))
            smoothed[index] = rgb_to_hex(rgb)
    return smoothed


ALGORITHMS: Dict[SmoothingAlgorithm, Interpolator] = {
    SmoothingAlgorithm.RGB: rgb_linear_interpolate,
    SmoothingAlgorithm.HSL: hsl_interpolate,
    SmoothingAlgorithm.LAB: lab_interpolate,
    SmoothingAlgorithm.BEZIER: bezier_interpolate,
}


# --- Strength blend and entry point ----------------------------------------

def _check_strength(strength: float) -> None:
    low, high = STRENGTH_BOUNDS
    if not low <= strength <= high:
        raise ValueError(f"strength must be within [{low}, {high}], got {strength}")


def apply_with_strength(
    original: Sequence[str], smoothed: Sequence[str], strength: float
) -> List[str]:
    _check_strength(strength)
    if len(original) != len(smoothed):
        raise ValueError(
            f"Sequences differ in length: {len(original)} != {len(smoothed)}"
        )
    if strength == 1:
        return list(smoothed)
    if strength == 0:
        return list(original)

    blended: List[str] = []
    for before, after in zip(original, smoothed):
        if before == after:
            blended.append(before)
            continue
        rgb = lerp_channels(_rgb_or_fallback(before), _rgb_or_fallback(after), strength)
        blended.append(rgb_to_hex(rgb))
    return blended


def smooth(
    colors: Sequence[str],
    locked: Iterable[int] = (),
    algorithm: object = DEFAULT_ALGORITHM,
    strength: float = DEFAULT_STRENGTH,
) -> List[str]:
    """Smooth unlocked bands of ``colors`` and blend by ``strength``.

    Locked indices and both ends of the sequence are never rewritten. An
    unrecognized ``algorithm`` returns the colors unchanged without blending.
    """
    _check_strength(strength)
    locks = _validated_locks(locked, len(colors))

    selected = parse_algorithm(algorithm)
    if selected is None:
        log.warning("Unknown smoothing algorithm %r; colors left unchanged", algorithm)
        return list(colors)

    if len(colors) < 2 or len(locks) == len(colors):
        return list(colors)

    log.debug(
        "Smoothing %d colors with %s at strength %.2f (%d locked)",
        len(colors),
        selected.value,
        strength,
        len(locks),
    )
    smoothed = ALGORITHMS[selected](colors, locks)
    return apply_with_strength(colors, smoothed, strength)


@dataclass
class SmoothingParams:
    colors: List[str]
    locked: Set[int] = field(default_factory=set)
    algorithm: str = DEFAULT_ALGORITHM
    strength: float = DEFAULT_STRENGTH

    def run(self) -> List[str]:
        return smooth(self.colors, self.locked, self.algorithm, self.strength)


# --- Band sequence helpers -------------------------------------------------

def interpolate_colors(hex_a: str, hex_b: str, factor: float) -> str:
    start = _rgb_or_fallback(hex_a)
    end = _rgb_or_fallback(hex_b)
    return rgb_to_hex(lerp_channels(start, end, factor))


def _nearest(value: float) -> int:
    return int(math.floor(value + 0.5))


def default_bands(
    count: int = DEFAULT_BAND_COUNT,
    start: RgbTuple = DEFAULT_START_RGB,
    end: RgbTuple = DEFAULT_END_RGB,
) -> List[str]:
    if count < MIN_BAND_COUNT:
        raise ValueError(f"count must be at least {MIN_BAND_COUNT}, got {count}")
    denominator = max(1, count - 1)
    return [
        rgb_to_hex(lerp_channels(start, end, i / denominator)) for i in range(count)
    ]


def resize_bands(
    colors: Sequence[str], locked: Iterable[int], count: int
) -> Tuple[List[str], Set[int]]:
    """Resample ``colors`` to ``count`` bands.

    Growing interpolates between neighbouring bands; shrinking keeps the
    nearest source band. Locks follow the band they were attached to and are
    dropped when that band does not survive.
    """
    if count < MIN_BAND_COUNT:
        raise ValueError(f"count must be at least {MIN_BAND_COUNT}, got {count}")
    current = len(colors)
    if current < 1:
        raise ValueError("cannot resize an empty band sequence")
    locks = _validated_locks(locked, current)

    if count == current:
        return list(colors), locks

    if count > current:
        resized: List[str] = []
        for i in range(count):
            source = i / (count - 1) * (current - 1)
            lower = math.floor(source)
            upper = min(lower + 1, current - 1)
            if lower == upper:
                resized.append(colors[lower])
            else:
                resized.append(
                    interpolate_colors(colors[lower], colors[upper], source - lower)
                )
        scale = (count - 1) / max(1, current - 1)
        resized_locks: Set[int] = set()
        for index in locks:
            target = _nearest(index * scale)
            resized[target] = colors[index]
            resized_locks.add(target)
        return resized, resized_locks

    resized = []
    resized_locks = set()
    for i in range(count):
        source = _nearest(i * (current - 1) / max(1, count - 1))
        resized.append(colors[source])
        if source in locks:
            resized_locks.add(i)
    return resized, resized_locks


def lightness_profile(colors: Sequence[str]) -> List[float]:
    """HSL lightness of each band in percent; unparsable colors read as 0."""
    profile: List[float] = []
    for color in colors:
        hsl = hex_to_hsl(color)
        profile.append(hsl[2] if hsl else 0.0)
    return profile
