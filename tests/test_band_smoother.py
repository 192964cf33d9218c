import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from band_smoother import (  # noqa: E402
    ALGORITHM_DESCRIPTIONS,
    ALGORITHMS,
    Segment,
    SmoothingAlgorithm,
    SmoothingParams,
    apply_with_strength,
    bezier_interpolate,
    cubic_bezier,
    default_bands,
    find_anchors,
    find_segments,
    hsl_interpolate,
    lab_interpolate,
    lightness_profile,
    parse_algorithm,
    resize_bands,
    rgb_linear_interpolate,
    smooth,
)
from color_spaces import hex_to_hsl, hex_to_rgb, hsl_to_hex  # noqa: E402

BANDS = [
    "#dafbe1",
    "#12ab34",
    "#ff00ff",
    "#0a0a0a",
    "#abcdef",
    "#fedcba",
    "#336699",
    "#ffffff",
    "#0a241b",
]


def test_find_segments_adds_implicit_endpoints():
    assert find_anchors({2, 5}, 8) == [0, 2, 5, 7]
    assert find_segments({2, 5}, 8) == [
        Segment(0, 2),
        Segment(2, 5),
        Segment(5, 7),
    ]


def test_find_segments_dedupes_locked_endpoints():
    assert find_anchors([7, 3, 0, 3], 8) == [0, 3, 7]
    assert find_segments({0, 3, 7}, 8) == [Segment(0, 3), Segment(3, 7)]


def test_find_segments_degenerate_lengths():
    assert find_segments(set(), 0) == []
    assert find_segments(set(), 1) == []
    assert find_segments(set(), 2) == [Segment(0, 1)]
    assert find_segments({3, 4}, 6) == [Segment(0, 3), Segment(3, 4), Segment(4, 5)]


def test_find_segments_rejects_out_of_range_locks():
    with pytest.raises(ValueError):
        find_segments({8}, 8)
    with pytest.raises(ValueError):
        find_segments({-1}, 8)


def test_segment_geometry():
    segment = Segment(2, 5)
    assert segment.length == 4
    assert list(segment.indices) == [2, 3, 4, 5]
    assert list(segment.interior) == [3, 4]
    assert segment.factor(3) == pytest.approx(1 / 3)


def test_rgb_linear_red_to_blue():
    colors = ["#ff0000", "#123456", "#123456", "#123456", "#0000ff"]
    result = smooth(colors, set(), SmoothingAlgorithm.RGB, 1.0)
    assert result == ["#ff0000", "#bf0040", "#800080", "#4000bf", "#0000ff"]


def test_hsl_takes_shortest_hue_path():
    start = hsl_to_hex((350.0, 100.0, 50.0))
    end = hsl_to_hex((10.0, 100.0, 50.0))
    result = hsl_interpolate([start, "#00ffff", end])

    assert result[1] == "#ff0000"
    hue = hex_to_hsl(result[1])[0]
    assert min(hue, 360 - hue) < 1


def test_hsl_wraps_hue_into_range():
    start = hsl_to_hex((20.0, 100.0, 50.0))
    end = hsl_to_hex((300.0, 100.0, 50.0))
    result = hsl_interpolate([start, "#000000", "#000000", "#000000", end])
    hues = [hex_to_hsl(color)[0] for color in result[1:4]]
    assert all(0 <= hue < 360 for hue in hues)
    # 20 -> -60 going backwards through red
    assert hues[1] == pytest.approx(340.0, abs=1.0)


def test_lab_interpolation_black_to_white():
    assert lab_interpolate(["#000000", "#ff00ff", "#ffffff"]) == [
        "#000000",
        "#777777",
        "#ffffff",
    ]


def test_lab_interpolation_encodes_out_of_gamut_midpoints():
    pairs = [("#00ff00", "#ff00ff"), ("#0000ff", "#ffff00"), ("#ff0000", "#00ffff")]
    for start, end in pairs:
        result = lab_interpolate([start, "#000000", "#000000", end])
        assert result[0] == start and result[-1] == end
        assert all(hex_to_rgb(color) is not None for color in result)


def test_bezier_midpoint_matches_linear_and_eases_elsewhere():
    assert bezier_interpolate(["#000000", "#ff0000", "#ffffff"])[1] == "#808080"
    result = bezier_interpolate(["#000000"] * 4 + ["#ffffff"])
    assert result == ["#000000", "#3a3a3a", "#808080", "#c5c5c5", "#ffffff"]


def test_cubic_bezier_endpoints():
    p0, p3 = (0.0, 10.0, 20.0), (255.0, 100.0, 0.0)
    assert cubic_bezier(p0, p0, p3, p3, 0.0) == pytest.approx(p0)
    assert cubic_bezier(p0, p0, p3, p3, 1.0) == pytest.approx(p3)


@pytest.mark.parametrize("algorithm", list(SmoothingAlgorithm))
def test_anchor_preservation(algorithm):
    locked = {3, 6}
    result = smooth(BANDS, locked, algorithm, 1.0)
    for index in locked | {0, len(BANDS) - 1}:
        assert result[index] == BANDS[index]


@pytest.mark.parametrize("algorithm", list(SmoothingAlgorithm))
def test_strength_boundaries(algorithm):
    locked = {4}
    assert smooth(BANDS, locked, algorithm, 0.0) == BANDS
    assert smooth(BANDS, locked, algorithm, 1.0) == ALGORITHMS[algorithm](BANDS, locked)


def test_partial_strength_blends_in_rgb():
    colors = ["#000000", "#ffffff", "#000000"]
    assert smooth(colors, set(), "rgb", 0.5) == ["#000000", "#808080", "#000000"]


def test_apply_with_strength_keeps_unchanged_positions_verbatim():
    original = ["#FF0000", "#00ff00"]
    smoothed = ["#FF0000", "#0000ff"]
    assert apply_with_strength(original, smoothed, 0.5) == ["#FF0000", "#008080"]


def test_apply_with_strength_rejects_bad_input():
    with pytest.raises(ValueError):
        apply_with_strength(["#000000"], ["#000000", "#ffffff"], 0.5)
    with pytest.raises(ValueError):
        apply_with_strength(["#000000"], ["#ffffff"], 1.5)


@pytest.mark.parametrize("algorithm", list(SmoothingAlgorithm))
@pytest.mark.parametrize("strength", [0.0, 0.3, 1.0])
def test_all_locked_is_noop(algorithm, strength):
    colors = ["#ABCDEF", "#000000", "#ff00ff", "#123456"]
    assert smooth(colors, {0, 1, 2, 3}, algorithm, strength) == colors


def test_short_sequences_pass_through():
    assert smooth(["#ABCDEF"], set(), "lab", 0.5) == ["#ABCDEF"]
    assert smooth([], set(), "lab", 0.5) == []
    assert smooth(["#000000", "#ffffff"], set(), "hsl", 1.0) == ["#000000", "#ffffff"]


def test_unknown_algorithm_returns_colors_unchanged(caplog):
    with caplog.at_level(logging.WARNING):
        result = smooth(BANDS, set(), "spline", 0.5)
    assert result == BANDS
    assert result is not BANDS
    assert "spline" in caplog.text


def test_smooth_rejects_invalid_preconditions():
    with pytest.raises(ValueError):
        smooth(BANDS, set(), "rgb", -0.1)
    with pytest.raises(ValueError):
        smooth(BANDS, {len(BANDS)}, "rgb", 1.0)


def test_smooth_does_not_mutate_input():
    colors = list(BANDS)
    smooth(colors, {2}, "bezier", 0.7)
    assert colors == BANDS


def test_invalid_anchor_reads_as_black(caplog):
    with caplog.at_level(logging.WARNING):
        result = rgb_linear_interpolate(["oops", "#123456", "#ffffff"])
    assert result == ["oops", "#808080", "#ffffff"]
    assert "oops" in caplog.text


def test_parse_algorithm():
    assert parse_algorithm(" LAB ") is SmoothingAlgorithm.LAB
    assert parse_algorithm(SmoothingAlgorithm.BEZIER) is SmoothingAlgorithm.BEZIER
    assert parse_algorithm("cubic") is None
    assert parse_algorithm(None) is None


def test_every_algorithm_is_described():
    assert set(ALGORITHM_DESCRIPTIONS) == set(SmoothingAlgorithm)
    assert set(ALGORITHMS) == set(SmoothingAlgorithm)


def test_smoothing_params_run():
    params = SmoothingParams(colors=["#ff0000", "#000000", "#0000ff"], algorithm="rgb")
    assert params.run() == ["#ff0000", "#800080", "#0000ff"]


def test_default_bands():
    bands = default_bands()
    assert len(bands) == 10
    assert bands[0] == "#dafbe1"
    assert bands[-1] == "#0a241b"
    assert default_bands(1) == ["#dafbe1"]
    with pytest.raises(ValueError):
        default_bands(0)


def test_resize_bands_grows_by_interpolation():
    colors, locked = resize_bands(["#000000", "#ffffff"], {1}, 3)
    assert colors == ["#000000", "#808080", "#ffffff"]
    assert locked == {2}


def test_resize_bands_grow_keeps_locked_color_under_its_lock():
    colors, locked = resize_bands(["#000000", "#ff0000", "#ffffff"], {1}, 4)
    assert locked == {2}
    assert [colors[i] for i in sorted(locked)] == ["#ff0000"]
    assert colors[0] == "#000000"
    assert colors[-1] == "#ffffff"


def test_resize_bands_grow_moves_every_interior_lock():
    source = ["#000000", "#123456", "#abcdef", "#ff00ff", "#ffffff"]
    colors, locked = resize_bands(source, {1, 3}, 9)
    assert locked == {2, 6}
    assert colors[2] == "#123456"
    assert colors[6] == "#ff00ff"


def test_resize_bands_shrinks_by_sampling():
    source = ["#000000", "#111111", "#222222", "#333333", "#444444"]
    colors, locked = resize_bands(source, {2, 3}, 3)
    assert colors == ["#000000", "#222222", "#444444"]
    assert locked == {1}


def test_resize_bands_same_count_copies():
    source = ["#000000", "#ffffff"]
    colors, locked = resize_bands(source, {0}, 2)
    assert colors == source and colors is not source
    assert locked == {0}


def test_lightness_profile():
    assert lightness_profile(["#ffffff", "#000000", "bad"]) == pytest.approx(
        [100.0, 0.0, 0.0]
    )
