from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Composite = Literal["source-over", "destination-out"]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    width: int
    opacity: float = 1.0
    composite: Composite = "source-over"
    # spray only: dots scattered per movement event within the radius (px)
    spray_radius: float = 0.0
    spray_density: int = 0

    @property
    def is_eraser(self) -> bool:
        return self.composite == "destination-out"

    @property
    def is_spray(self) -> bool:
        return self.spray_density > 0

    @property
    def buffered(self) -> bool:
        # Translucent strokes go through an offscreen mask so overlaps don't darken.
        return self.opacity < 1.0 and not self.is_eraser


TOOLS: dict[str, ToolSpec] = {
    "pen": ToolSpec("pen", width=3),
    "marker": ToolSpec("marker", width=14, opacity=0.35),
    "eraser": ToolSpec("eraser", width=24, composite="destination-out"),
    "spray": ToolSpec("spray", width=1, spray_radius=14.0, spray_density=24),
}


def resolve_tool(tool: ToolSpec | str) -> ToolSpec:
    if isinstance(tool, ToolSpec):
        return tool
    try:
        return TOOLS[tool]
    except KeyError:
        raise ValueError(f"unknown tool {tool!r} (expected one of {sorted(TOOLS)})") from None
