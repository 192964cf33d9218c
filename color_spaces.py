"""Color space utilities for hex, RGB, HSL and CIE-LAB conversions."""
from __future__ import annotations

import math
import re
from typing import Optional, Tuple

RgbTuple = Tuple[int, int, int]
RgbFloat = Tuple[float, float, float]
HslColor = Tuple[float, float, float]
LabColor = Tuple[float, float, float]

_HEX_PATTERN = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)

# D65 reference white
WHITE_X = 0.95047
WHITE_Y = 1.00000
WHITE_Z = 1.08883

LAB_EPSILON = 0.008856
LAB_KAPPA = 7.787
LAB_OFFSET = 16 / 116


# --- Basic RGB helpers -----------------------------------------------------

def clamp_channel(value: float) -> float:
    return max(0.0, min(255.0, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hex_to_rgb(hex_color: str) -> Optional[RgbTuple]:
    """Parse ``#rrggbb`` (leading ``#`` optional); ``None`` when malformed."""
    match = _HEX_PATTERN.fullmatch(hex_color)
    if match is None:
        return None
    return (int(match.group(1), 16), int(match.group(2), 16), int(match.group(3), 16))


def rgb_to_hex(rgb: RgbFloat) -> str:
    """Encode channels as ``#rrggbb``.

    This is the only place channels are rounded and clamped; everything
    upstream keeps full float precision.
    """
    channels = (int(clamp_channel(_round_half_up(c))) for c in rgb)
    return "#{:02x}{:02x}{:02x}".format(*channels)


def normalize_hex(value: str) -> Optional[str]:
    raw = value.replace("#", "", 1)
    if not re.fullmatch(r"[0-9a-fA-F]{6}", raw):
        return None
    return "#" + raw.lower()


def increment_hex_color(hex_color: str, increment: int) -> str:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    return rgb_to_hex(tuple(clamp_channel(c + increment) for c in rgb))


# --- HSL conversions -------------------------------------------------------

def rgb_to_hsl(rgb: RgbFloat) -> HslColor:
    r, g, b = (c / 255.0 for c in rgb)
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    if high == low:
        return (0.0, 0.0, lightness * 100)

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2 - high - low)
    else:
        saturation = delta / (high + low)

    if high == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif high == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    hue /= 6

    return (hue * 360, saturation * 100, lightness * 100)


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl: HslColor) -> RgbFloat:
    h, s, l = hsl
    h /= 360
    s /= 100
    l /= 100

    if s == 0:
        return (l * 255, l * 255, l * 255)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    r = _hue_to_rgb(p, q, h + 1 / 3)
    g = _hue_to_rgb(p, q, h)
    b = _hue_to_rgb(p, q, h - 1 / 3)
    return (r * 255, g * 255, b * 255)


def hex_to_hsl(hex_color: str) -> Optional[HslColor]:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None
    return rgb_to_hsl(rgb)


def hsl_to_hex(hsl: HslColor) -> str:
    return rgb_to_hex(hsl_to_rgb(hsl))


def normalize_hue(hue: float) -> float:
    return hue % 360.0


# --- CIE-LAB conversions ---------------------------------------------------

def _srgb_to_linear(channel: float) -> float:
    if channel <= 0.04045:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def _linear_to_srgb(channel: float) -> float:
    if channel <= 0.0031308:
        return channel * 12.92
    return 1.055 * (channel ** (1 / 2.4)) - 0.055


def _lab_f(t: float) -> float:
    if t > LAB_EPSILON:
        return t ** (1 / 3)
    return LAB_KAPPA * t + LAB_OFFSET


def _lab_f_inv(t: float) -> float:
    cube = t ** 3
    if cube > LAB_EPSILON:
        return cube
    return (t - LAB_OFFSET) / LAB_KAPPA


def rgb_to_lab(rgb: RgbFloat) -> LabColor:
    r_l, g_l, b_l = (_srgb_to_linear(c / 255.0) for c in rgb)

    x = 0.4124564 * r_l + 0.3575761 * g_l + 0.1804375 * b_l
    y = 0.2126729 * r_l + 0.7151522 * g_l + 0.0721750 * b_l
    z = 0.0193339 * r_l + 0.1191920 * g_l + 0.9503041 * b_l

    fx = _lab_f(x / WHITE_X)
    fy = _lab_f(y / WHITE_Y)
    fz = _lab_f(z / WHITE_Z)

    L = 116 * fy - 16
    A = 500 * (fx - fy)
    B = 200 * (fy - fz)
    return (L, A, B)


def lab_to_rgb(lab: LabColor) -> RgbFloat:
    """Inverse of :func:`rgb_to_lab`. Channels may fall outside [0, 255]."""
    L, A, B = lab
    fy = (L + 16) / 116
    fx = A / 500 + fy
    fz = fy - B / 200

    x = _lab_f_inv(fx) * WHITE_X
    y = _lab_f_inv(fy) * WHITE_Y
    z = _lab_f_inv(fz) * WHITE_Z

    r_l = 3.2404542 * x - 1.5371385 * y - 0.4985314 * z
    g_l = -0.9692660 * x + 1.8760108 * y + 0.0415560 * z
    b_l = 0.0556434 * x - 0.2040259 * y + 1.0572252 * z

    return tuple(_linear_to_srgb(c) * 255 for c in (r_l, g_l, b_l))


def hex_to_lab(hex_color: str) -> Optional[LabColor]:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None
    return rgb_to_lab(rgb)


def lab_to_hex(lab: LabColor) -> str:
    return rgb_to_hex(lab_to_rgb(lab))


# --- Luminance and contrast ------------------------------------------------

def relative_luminance(rgb: RgbFloat) -> float:
    def _channel(value: float) -> float:
        c = value / 255.0
        if c <= 0.03928:
            return c / 12.92
        return ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (_channel(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(hex_a: str, hex_b: str) -> float:
    rgb_a = hex_to_rgb(hex_a)
    rgb_b = hex_to_rgb(hex_b)
    if rgb_a is None or rgb_b is None:
        return 1.0

    lum_a = relative_luminance(rgb_a)
    lum_b = relative_luminance(rgb_b)
    brightest = max(lum_a, lum_b)
    darkest = min(lum_a, lum_b)
    return (brightest + 0.05) / (darkest + 0.05)


def is_light(hex_color: str) -> bool:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return True
    r, g, b = rgb
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255 > 0.5
