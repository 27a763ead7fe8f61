"""Drawing command definitions.

Defines the ToolName enum and per-command Pydantic argument models with
strict validation (extra="forbid") so that unexpected fields in a command
are rejected before anything touches the canvas.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from indexpng.models import RGBColor


class ToolName(str, Enum):
    """Canonical names for every drawing command."""

    SET_PIXEL = "set_pixel"
    DRAW_LINE = "draw_line"
    DRAW_RECT = "draw_rect"
    DRAW_BORDERED_RECT = "draw_bordered_rect"
    DRAW_FILLED_CIRCLE = "draw_filled_circle"
    DRAW_BORDERED_CIRCLE = "draw_bordered_circle"


# ---------------------------------------------------------------------------
# Per-command argument models
# ---------------------------------------------------------------------------

class SetPixelArgs(BaseModel, extra="forbid"):
    """Arguments for the set_pixel command."""

    x: int = Field(ge=0, description="X coordinate")
    y: int = Field(ge=0, description="Y coordinate")
    color: RGBColor


class DrawLineArgs(BaseModel, extra="forbid"):
    """Arguments for the draw_line command (a filled width x height block)."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    color: RGBColor


class DrawRectArgs(BaseModel, extra="forbid"):
    """Arguments for the draw_rect command."""

    x1: int = Field(ge=0)
    y1: int = Field(ge=0)
    x2: int = Field(ge=0)
    y2: int = Field(ge=0)
    color: RGBColor

    @model_validator(mode="after")
    def _check_rect_order(self) -> DrawRectArgs:
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ValueError(
                "x2 must be >= x1 and y2 must be >= y1 for draw_rect"
            )
        return self


class DrawBorderedRectArgs(BaseModel, extra="forbid"):
    """Arguments for the draw_bordered_rect command."""

    x1: int = Field(ge=0)
    y1: int = Field(ge=0)
    x2: int = Field(ge=0)
    y2: int = Field(ge=0)
    border_size: int = Field(ge=1)
    inside_color: RGBColor
    outside_color: RGBColor

    @model_validator(mode="after")
    def _check_rect_order(self) -> DrawBorderedRectArgs:
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ValueError(
                "x2 must be >= x1 and y2 must be >= y1 for draw_bordered_rect"
            )
        if 2 * self.border_size > min(self.x2 - self.x1, self.y2 - self.y1):
            raise ValueError("border_size leaves no room for the rectangle interior")
        return self


class DrawFilledCircleArgs(BaseModel, extra="forbid"):
    """Arguments for the draw_filled_circle command."""

    cx: int = Field(ge=0, description="Center X")
    cy: int = Field(ge=0, description="Center Y")
    radius: int = Field(ge=0)
    color: RGBColor


class DrawBorderedCircleArgs(BaseModel, extra="forbid"):
    """Arguments for the draw_bordered_circle command."""

    cx: int = Field(ge=0, description="Center X")
    cy: int = Field(ge=0, description="Center Y")
    radius: int = Field(ge=1)
    border_size: int = Field(ge=1)
    inside_color: RGBColor
    outside_color: RGBColor

    @model_validator(mode="after")
    def _check_border(self) -> DrawBorderedCircleArgs:
        if self.border_size > self.radius:
            raise ValueError("border_size must not exceed radius")
        return self
