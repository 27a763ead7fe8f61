"""In-memory indexed-colour PNG encoder with a small rasterizer."""

from indexpng.encoder.canvas import PNG_SIGNATURE, Image, PNGImage
from indexpng.encoder.layout import ChunkLayout
from indexpng.errors import InvalidGeometryError, PixelOutOfBoundsError
from indexpng.harness import DrawingHarness, ToolCallResult
from indexpng.models import Coordinate, RGBColor

__all__ = [
    "PNG_SIGNATURE",
    "Image",
    "PNGImage",
    "ChunkLayout",
    "InvalidGeometryError",
    "PixelOutOfBoundsError",
    "DrawingHarness",
    "ToolCallResult",
    "Coordinate",
    "RGBColor",
]
