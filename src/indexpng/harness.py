"""Drawing harness -- validates and executes drawing commands on a canvas.

The canvas primitives trust their callers with coordinates.  The harness
is the checked front door for commands that come from data (dicts parsed
from JSON, fixtures, ...) and enforces a validation chain before any
drawing function runs:

1. **Command name** -- must be a valid ``ToolName`` enum member.
2. **Args** -- Pydantic strict validation (``extra="forbid"``).
3. **Bounds** -- every pixel the command can touch must be on the canvas.
4. **Execute** -- static dispatch table only (no ``getattr`` / ``eval``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from indexpng.encoder.canvas import Image
from indexpng.errors import InvalidGeometryError
from indexpng.tools.definitions import (
    DrawBorderedCircleArgs,
    DrawBorderedRectArgs,
    DrawFilledCircleArgs,
    DrawLineArgs,
    DrawRectArgs,
    SetPixelArgs,
    ToolName,
)
from indexpng.tools.executors import (
    execute_draw_bordered_circle,
    execute_draw_bordered_rect,
    execute_draw_filled_circle,
    execute_draw_line,
    execute_draw_rect,
    execute_set_pixel,
)

log = structlog.get_logger()


@dataclass
class ToolCallResult:
    """Outcome of a single command."""

    tool_name: str
    success: bool
    message: str


# ---------------------------------------------------------------------------
# Pixel extents per args model
# ---------------------------------------------------------------------------

Extent = tuple[int, int, int, int]  # min_x, min_y, max_x, max_y (inclusive)


def _line_extent(args: DrawLineArgs) -> Extent:
    return (
        args.x,
        args.y,
        args.x + max(args.width, 1) - 1,
        args.y + max(args.height, 1) - 1,
    )


def _rect_extent(args: DrawRectArgs | DrawBorderedRectArgs) -> Extent:
    return (args.x1, args.y1, max(args.x1, args.x2 - 1), max(args.y1, args.y2 - 1))


def _filled_circle_extent(args: DrawFilledCircleArgs) -> Extent:
    r = args.radius
    return (args.cx - r, args.cy - r, args.cx + r, args.cy + r)


def _bordered_circle_extent(args: DrawBorderedCircleArgs) -> Extent:
    # Strips reach one column left of the outline and border_size - 1
    # pixels right of and below it; nothing is stamped above the top point.
    r = args.radius
    reach = r + args.border_size - 1
    return (args.cx - r - 1, args.cy - r, args.cx + reach, args.cy + reach)


_EXTENTS: dict[type[BaseModel], Callable[[Any], Extent]] = {
    SetPixelArgs: lambda args: (args.x, args.y, args.x, args.y),
    DrawLineArgs: _line_extent,
    DrawRectArgs: _rect_extent,
    DrawBorderedRectArgs: _rect_extent,
    DrawFilledCircleArgs: _filled_circle_extent,
    DrawBorderedCircleArgs: _bordered_circle_extent,
}


# ---------------------------------------------------------------------------
# Harness
# ---------------------------------------------------------------------------

class DrawingHarness:
    """Validates and executes drawing commands on an :class:`Image`.

    The class keeps a static ``DISPATCH`` table that maps each
    ``ToolName`` to a ``(ArgsModel, executor_fn)`` pair.
    """

    DISPATCH: dict[ToolName, tuple[type[BaseModel], Callable[..., str]]] = {
        ToolName.SET_PIXEL: (SetPixelArgs, execute_set_pixel),
        ToolName.DRAW_LINE: (DrawLineArgs, execute_draw_line),
        ToolName.DRAW_RECT: (DrawRectArgs, execute_draw_rect),
        ToolName.DRAW_BORDERED_RECT: (DrawBorderedRectArgs, execute_draw_bordered_rect),
        ToolName.DRAW_FILLED_CIRCLE: (DrawFilledCircleArgs, execute_draw_filled_circle),
        ToolName.DRAW_BORDERED_CIRCLE: (
            DrawBorderedCircleArgs,
            execute_draw_bordered_circle,
        ),
    }

    def __init__(self, canvas: Image) -> None:
        self.canvas = canvas
        self.tool_calls_executed: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(self, tool_name_str: str, raw_args: dict[str, Any]) -> ToolCallResult:
        """Validate and execute a single command.

        Returns a ``ToolCallResult`` regardless of success or failure so
        callers never need to handle exceptions from this layer.
        """
        try:
            tool_name = ToolName(tool_name_str)
        except ValueError:
            return self._fail(tool_name_str, f"Unknown tool: {tool_name_str!r}")

        args_model_cls, executor_fn = self.DISPATCH[tool_name]

        try:
            args = args_model_cls.model_validate(raw_args)
        except ValidationError as exc:
            return self._fail(tool_name_str, f"Argument validation failed: {exc}")

        bounds_error = self._check_bounds(args)
        if bounds_error is not None:
            return self._fail(tool_name_str, bounds_error)

        try:
            message = executor_fn(self.canvas, args)
        except InvalidGeometryError as exc:
            return self._fail(tool_name_str, f"Invalid geometry: {exc}")

        self.tool_calls_executed += 1
        return ToolCallResult(tool_name=tool_name_str, success=True, message=message)

    def execute_many(
        self, calls: Iterable[tuple[str, dict[str, Any]]]
    ) -> list[ToolCallResult]:
        """Run ``(tool_name, args)`` pairs in order; failures do not stop the batch."""
        return [self.execute(name, raw_args) for name, raw_args in calls]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fail(self, tool_name_str: str, message: str) -> ToolCallResult:
        log.info("tool_call_rejected", tool_name=tool_name_str, reason=message)
        return ToolCallResult(tool_name=tool_name_str, success=False, message=message)

    def _check_bounds(self, args: BaseModel) -> str | None:
        """Return an error message if the command could draw outside the canvas.

        Returns ``None`` when every touched pixel is on the canvas.
        """
        min_x, min_y, max_x, max_y = _EXTENTS[type(args)](args)

        w = self.canvas.width
        h = self.canvas.height

        if min_x < 0 or max_x >= w:
            return (
                f"Horizontal extent {min_x}..{max_x} is out of bounds "
                f"(canvas width={w})"
            )
        if min_y < 0 or max_y >= h:
            return (
                f"Vertical extent {min_y}..{max_y} is out of bounds "
                f"(canvas height={h})"
            )

        return None
