from __future__ import annotations

import math
import random

import pytest

from drawity.canvas import TOOLS, Canvas, ToolSpec, decode_data_url, encode_data_url, resolve_tool


def alpha(canvas: Canvas, x: int, y: int) -> int:
    return canvas.image.getpixel((x, y))[3]


def test_new_canvas_is_transparent():
    canvas = Canvas(20, 10)
    assert canvas.image.mode == "RGBA"
    assert canvas.image.getbbox() is None


def test_pen_paints_segment_between_samples():
    canvas = Canvas(100, 100)
    canvas.begin_stroke("pen", "#ff0000", (10, 50))
    canvas.stroke_to((90, 50))
    canvas.end_stroke()

    assert canvas.image.getpixel((50, 50)) == (255, 0, 0, 255)
    assert alpha(canvas, 50, 10) == 0


def test_stroke_to_requires_begin():
    with pytest.raises(RuntimeError):
        Canvas(10, 10).stroke_to((1, 1))


def test_eraser_clears_to_transparent():
    canvas = Canvas(100, 100)
    canvas.draw_stroke("pen", "#000000", [(10, 50), (90, 50)])
    canvas.draw_stroke("eraser", "#000000", [(50, 20), (50, 80)])

    assert alpha(canvas, 50, 50) == 0
    assert alpha(canvas, 15, 50) == 255


def test_marker_overlaps_do_not_double_darken():
    marker = TOOLS["marker"]
    canvas = Canvas(100, 100)
    # doubles back over itself; every covered pixel must end at the same alpha
    canvas.draw_stroke("marker", "#0000ff", [(10, 50), (60, 50), (30, 50), (90, 50)])

    expected = round(255 * marker.opacity)
    for x in (10, 30, 45, 60, 90):
        assert canvas.image.getpixel((x, 50)) == (0, 0, 255, expected)


def test_marker_composites_over_existing_paint():
    canvas = Canvas(50, 50)
    canvas.draw_stroke("pen", "#ffffff", [(0, 25), (49, 25)])
    canvas.draw_stroke("marker", "#000000", [(25, 0), (25, 49)])

    r, g, b, a = canvas.image.getpixel((25, 25))
    assert a == 255
    assert 0 < r < 255 and r == g == b


def test_spray_scatters_within_radius():
    spray = TOOLS["spray"]
    canvas = Canvas(100, 100, rng=random.Random(7))
    canvas.begin_stroke("spray", "#00ff00", (50, 50))
    canvas.end_stroke()

    painted = [
        (x, y) for x in range(100) for y in range(100) if alpha(canvas, x, y) > 0
    ]
    assert 0 < len(painted) <= spray.spray_density
    assert all(math.hypot(x - 50, y - 50) <= spray.spray_radius + 1 for x, y in painted)


def test_spray_is_deterministic_with_seeded_rng():
    a = Canvas(60, 60, rng=random.Random(3))
    b = Canvas(60, 60, rng=random.Random(3))
    for c in (a, b):
        c.draw_stroke("spray", "#123456", [(20, 20), (30, 30), (40, 40)])
    assert a.image.tobytes() == b.image.tobytes()


def test_custom_tool_spec():
    thick = ToolSpec("thick", width=20)
    canvas = Canvas(60, 60)
    canvas.draw_stroke(thick, "#000000", [(10, 30), (50, 30)])
    assert alpha(canvas, 30, 21) == 255


def test_unknown_tool():
    with pytest.raises(ValueError):
        resolve_tool("laser")


def test_snapshot_round_trip_keeps_pixels():
    canvas = Canvas(40, 30)
    canvas.draw_stroke("pen", "#336699", [(5, 5), (35, 25)])

    data_url = canvas.snapshot()
    assert data_url.startswith("data:image/png;base64,")

    restored = Canvas.from_snapshot(data_url)
    assert restored.size == (40, 30)
    assert restored.image.tobytes() == canvas.image.tobytes()


def test_load_snapshot_scales_to_surface():
    small = Canvas(10, 10)
    small.draw_stroke("pen", "#000000", [(0, 5), (9, 5)])

    big = Canvas(40, 40)
    big.load_snapshot(small.snapshot())
    assert big.image.size == (40, 40)
    assert big.image.getbbox() is not None


def test_clear():
    canvas = Canvas(20, 20)
    canvas.draw_stroke("pen", "#000000", [(0, 0), (19, 19)])
    canvas.clear()
    assert canvas.image.getbbox() is None


@pytest.mark.parametrize(
    "payload",
    [
        "img1",
        "data:image/png,not-base64-flagged",
        "data:image/png;base64,@@@@",
        "data:image/png;base64," + "aGVsbG8=",  # valid base64, not an image
    ],
)
def test_decode_rejects_malformed(payload):
    with pytest.raises(ValueError):
        decode_data_url(payload)


def test_encode_decode_arbitrary_image():
    from PIL import Image

    img = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
    assert decode_data_url(encode_data_url(img)).getpixel((0, 0)) == (1, 2, 3, 4)
