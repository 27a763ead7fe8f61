"""Executor functions for each drawing command.

Every executor has the signature:
    (canvas: Image, args: <ToolArgs>) -> str

Colours are registered in the canvas palette on first use.  The returned
string is a human-readable summary of what was drawn.
"""

from __future__ import annotations

from indexpng.encoder.canvas import Image
from indexpng.models import RGBColor
from indexpng.tools.definitions import (
    DrawBorderedCircleArgs,
    DrawBorderedRectArgs,
    DrawFilledCircleArgs,
    DrawLineArgs,
    DrawRectArgs,
    SetPixelArgs,
)


def _describe(color: RGBColor) -> str:
    return f"({color.r}, {color.g}, {color.b}, {color.a:g})"


def execute_set_pixel(canvas: Image, args: SetPixelArgs) -> str:
    """Set a single pixel on the canvas."""
    index = canvas.create_rgb_color(args.color)
    canvas.set_pixel(args.x, args.y, index)
    return f"Pixel set at ({args.x}, {args.y}) to {_describe(args.color)} [index {index}]"


def execute_draw_line(canvas: Image, args: DrawLineArgs) -> str:
    """Fill a width x height block."""
    index = canvas.create_rgb_color(args.color)
    canvas.draw_line(args.x, args.y, args.width, args.height, index)
    return (
        f"Line drawn at ({args.x},{args.y}) "
        f"({args.width}x{args.height} px) with {_describe(args.color)}"
    )


def execute_draw_rect(canvas: Image, args: DrawRectArgs) -> str:
    """Fill a rectangle, right and bottom edges exclusive."""
    index = canvas.create_rgb_color(args.color)
    canvas.draw_rect(args.x1, args.y1, args.x2, args.y2, index)
    width = args.x2 - args.x1
    height = args.y2 - args.y1
    return (
        f"Filled rect ({args.x1},{args.y1})-({args.x2},{args.y2}) "
        f"({width}x{height} px) with {_describe(args.color)}"
    )


def execute_draw_bordered_rect(canvas: Image, args: DrawBorderedRectArgs) -> str:
    """Fill a rectangle and frame it with a border."""
    outside = canvas.create_rgb_color(args.outside_color)
    inside = canvas.create_rgb_color(args.inside_color)
    canvas.draw_bordered_rect(
        args.x1, args.y1, args.x2, args.y2, args.border_size, inside, outside
    )
    return (
        f"Bordered rect ({args.x1},{args.y1})-({args.x2},{args.y2}) "
        f"border={args.border_size} inside {_describe(args.inside_color)} "
        f"border {_describe(args.outside_color)}"
    )


def execute_draw_filled_circle(canvas: Image, args: DrawFilledCircleArgs) -> str:
    """Draw a filled circle."""
    index = canvas.create_rgb_color(args.color)
    canvas.draw_filled_circle(args.cx, args.cy, args.radius, index)
    return (
        f"Circle (filled) at ({args.cx},{args.cy}) r={args.radius} "
        f"with {_describe(args.color)}"
    )


def execute_draw_bordered_circle(canvas: Image, args: DrawBorderedCircleArgs) -> str:
    """Draw a filled circle with a border."""
    outside = canvas.create_rgb_color(args.outside_color)
    inside = canvas.create_rgb_color(args.inside_color)
    canvas.draw_bordered_circle(
        args.cx, args.cy, args.radius, args.border_size, inside, outside
    )
    return (
        f"Circle (bordered) at ({args.cx},{args.cy}) r={args.radius} "
        f"border={args.border_size}"
    )
