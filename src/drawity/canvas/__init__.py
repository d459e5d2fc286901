from .snapshot import decode_data_url, encode_data_url
from .surface import Canvas, Point
from .tools import TOOLS, ToolSpec, resolve_tool

__all__ = [
    "Canvas",
    "Point",
    "TOOLS",
    "ToolSpec",
    "decode_data_url",
    "encode_data_url",
    "resolve_tool",
]
