"""Colour and coordinate value types shared by the canvas and the tools."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


class RGBColor(BaseModel, extra="forbid"):
    """An RGBA colour with 8-bit channels and a 0..1 alpha."""

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)
    a: float = Field(default=1.0, ge=0.0, le=1.0, description="Opacity")

    @property
    def alpha_byte(self) -> int:
        """Alpha scaled to 0..255, rounding halves up."""
        return int(self.a * 255 + 0.5)


@dataclass(frozen=True)
class Coordinate:
    """A single pixel position."""

    x: int
    y: int
