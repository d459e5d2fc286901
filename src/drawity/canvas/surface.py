from __future__ import annotations

import math
import random
from collections.abc import Iterable
from typing import TypeAlias

from PIL import Image, ImageChops, ImageColor, ImageDraw

from .snapshot import decode_data_url, encode_data_url
from .tools import ToolSpec, resolve_tool

Point: TypeAlias = tuple[float, float]  # (x, y) in px
RGB: TypeAlias = tuple[int, int, int]


def _rgb(color: str) -> RGB:
    c = ImageColor.getrgb(color)
    return (c[0], c[1], c[2])


def _line(draw: ImageDraw.ImageDraw, a: Point, b: Point, width: int, fill) -> None:
    # Round caps: PIL lines are square-ended, so dab a disc on both ends.
    draw.line([a, b], fill=fill, width=width)
    r = width / 2.0
    for x, y in (a, b):
        draw.ellipse([x - r, y - r, x + r, y + r], fill=fill)


class Canvas:
    """
    RGBA drawing surface fed by discrete pointer samples.

    Each `stroke_to` renders one segment from the previous sample. Blending
    depends on the tool: normal paint, destructive erase (alpha -> 0),
    isolated translucent strokes, or spray.
    """

    def __init__(self, width: int, height: int, *, rng: random.Random | None = None):
        self.width = width
        self.height = height
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._rng = rng or random.Random()

        self._tool: ToolSpec | None = None
        self._color: RGB = (0, 0, 0)
        self._last: Point | None = None
        # translucent strokes: pre-stroke image + full-strength stroke mask
        self._base: Image.Image | None = None
        self._mask: Image.Image | None = None

    @classmethod
    def from_snapshot(cls, data_url: str, *, rng: random.Random | None = None) -> Canvas:
        img = decode_data_url(data_url)
        canvas = cls(img.width, img.height, rng=rng)
        canvas.image = img
        return canvas

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    # -------------------------------------------------
    # Snapshot I/O
    # -------------------------------------------------

    def snapshot(self) -> str:
        return encode_data_url(self.image)

    def load_snapshot(self, data_url: str) -> None:
        """Replace the current content with a decoded snapshot (scaled to fit)."""
        img = decode_data_url(data_url)
        if img.size != self.size:
            img = img.resize(self.size)
        self.image = img
        self._reset_stroke()

    def clear(self) -> None:
        self.image = Image.new("RGBA", self.size, (0, 0, 0, 0))
        self._reset_stroke()

    # -------------------------------------------------
    # Strokes
    # -------------------------------------------------

    def begin_stroke(self, tool: ToolSpec | str, color: str, point: Point) -> None:
        if self._tool is not None:
            self.end_stroke()
        self._tool = resolve_tool(tool)
        self._color = _rgb(color)
        self._last = point
        if self._tool.buffered:
            self._base = self.image.copy()
            self._mask = Image.new("L", self.size, 0)
        # a tap with no movement still leaves a mark
        self._segment(point, point)

    def stroke_to(self, point: Point) -> None:
        if self._tool is None or self._last is None:
            raise RuntimeError("stroke_to() called before begin_stroke()")
        self._segment(self._last, point)
        self._last = point

    def end_stroke(self) -> None:
        self._reset_stroke()

    def draw_stroke(self, tool: ToolSpec | str, color: str, points: Iterable[Point]) -> None:
        it = iter(points)
        first = next(it, None)
        if first is None:
            return
        self.begin_stroke(tool, color, first)
        for p in it:
            self.stroke_to(p)
        self.end_stroke()

    def _reset_stroke(self) -> None:
        self._tool = None
        self._last = None
        self._base = None
        self._mask = None

    def _segment(self, a: Point, b: Point) -> None:
        tool = self._tool
        assert tool is not None
        if tool.is_spray:
            self._spray(b, tool)
        elif tool.is_eraser:
            self._erase(a, b, tool)
        elif tool.buffered:
            self._paint_buffered(a, b, tool)
        else:
            _line(ImageDraw.Draw(self.image), a, b, tool.width, self._color + (255,))

    def _erase(self, a: Point, b: Point, tool: ToolSpec) -> None:
        mask = Image.new("L", self.size, 0)
        _line(ImageDraw.Draw(mask), a, b, tool.width, 255)
        alpha = self.image.getchannel("A")
        self.image.putalpha(ImageChops.subtract(alpha, mask))

    def _paint_buffered(self, a: Point, b: Point, tool: ToolSpec) -> None:
        assert self._base is not None and self._mask is not None
        _line(ImageDraw.Draw(self._mask), a, b, tool.width, 255)
        lut = [round(v * tool.opacity) for v in range(256)]
        layer = Image.new("RGBA", self.size, self._color + (0,))
        layer.putalpha(self._mask.point(lut))
        self.image = Image.alpha_composite(self._base, layer)

    def _spray(self, center: Point, tool: ToolSpec) -> None:
        draw = ImageDraw.Draw(self.image)
        cx, cy = center
        fill = self._color + (round(255 * tool.opacity),)
        for _ in range(tool.spray_density):
            # uniform over the disc
            ang = self._rng.uniform(0.0, 2 * math.pi)
            r = tool.spray_radius * math.sqrt(self._rng.random())
            x = round(cx + r * math.cos(ang))
            y = round(cy + r * math.sin(ang))
            if 0 <= x < self.width and 0 <= y < self.height:
                draw.point((x, y), fill=fill)
