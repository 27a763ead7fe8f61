"""Indexed-colour canvas that draws straight into an encoded PNG buffer.

The buffer is laid out once at construction (see
:mod:`indexpng.encoder.layout`).  Drawing writes palette indices at their
final byte offsets inside the stored zlib stream, and retrieving the image
only has to refresh the checksums.

Pixel coordinates are not range-checked unless ``check_bounds`` is on;
writing outside the canvas corrupts neighbouring bytes.
"""

from __future__ import annotations

import base64

import structlog

from indexpng.config import settings
from indexpng.encoder import checksum
from indexpng.encoder.layout import ChunkLayout
from indexpng.encoder.palette import Palette
from indexpng.errors import InvalidGeometryError, PixelOutOfBoundsError
from indexpng.models import Coordinate, RGBColor

log = structlog.get_logger()

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

CirclePair = tuple[Coordinate, Coordinate]


class Image:
    """An indexed-colour image with a palette of at most ``depth`` entries.

    *header* is written verbatim before IHDR.  The base class takes it as
    given; use :class:`PNGImage` for a buffer that starts with the PNG
    signature.
    """

    def __init__(
        self,
        width: int,
        height: int,
        depth: int | None = None,
        background_color: RGBColor | None = None,
        header: bytes | str = b"",
        check_bounds: bool | None = None,
    ) -> None:
        if isinstance(header, str):
            header = header.encode("latin-1")
        if depth is None:
            depth = settings.DEFAULT_DEPTH
        if background_color is None:
            background_color = RGBColor(r=0, g=0, b=0, a=0)

        self.layout = ChunkLayout.compute(width, height, depth, origin=len(header))
        self.check_bounds = settings.CHECK_BOUNDS if check_bounds is None else check_bounds

        self._buffer = bytearray(self.layout.total_size)
        self._buffer[:len(header)] = header
        self.layout.write_headers(self._buffer)

        self.palette = Palette(self.layout)
        # Fresh pixel bytes are zero, so the first colour is the background.
        self.background_color = self.create_rgb_color(background_color)

        log.debug(
            "canvas_created",
            width=width,
            height=height,
            depth=depth,
            size=len(self._buffer),
            blocks=len(self.layout.blocks),
        )

    @property
    def width(self) -> int:
        return self.layout.width

    @property
    def height(self) -> int:
        return self.layout.height

    @property
    def depth(self) -> int:
        return self.layout.depth

    # ------------------------------------------------------------------
    # Colours
    # ------------------------------------------------------------------

    def color(self, red: int, green: int, blue: int, alpha: int = -1) -> int:
        """Return the palette index for an RGBA colour.

        A negative *alpha* means fully opaque.  When the palette is full a
        new colour silently maps to index 0.
        """
        if alpha < 0:
            alpha = 255
        return self.palette.lookup_or_assign(self._buffer, red, green, blue, alpha)

    def create_rgb_color(self, color: RGBColor) -> int:
        """Palette index for an :class:`RGBColor` (alpha given as 0..1)."""
        return self.color(color.r, color.g, color.b, color.alpha_byte)

    # ------------------------------------------------------------------
    # Pixels
    # ------------------------------------------------------------------

    def index(self, x: int, y: int) -> int:
        """Buffer offset of pixel ``(x, y)``."""
        if self.check_bounds and not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelOutOfBoundsError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} canvas"
            )
        # +1 skips the row's filter byte
        return self.layout.position_offset(y * (self.width + 1) + x + 1)

    def set_pixel(self, x: int, y: int, color: int) -> None:
        self._buffer[self.index(x, y)] = color

    def get_pixel(self, x: int, y: int) -> int:
        return self._buffer[self.index(x, y)]

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def draw_line(self, x: int, y: int, width: int, height: int, color: int) -> None:
        """Fill the ``width x height`` block whose top-left corner is ``(x, y)``."""
        for i in range(width):
            for j in range(height):
                self.set_pixel(x + i, y + j, color)

    def draw_rect(self, x1: int, y1: int, x2: int, y2: int, color: int) -> None:
        """Fill from ``(x1, y1)`` up to but not including ``(x2, y2)``."""
        _check_corners(x1, y1, x2, y2)
        self.draw_line(x1, y1, x2 - x1, y2 - y1, color)

    def draw_bordered_rect(
        self,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        border_size: int,
        inside_color: int,
        outside_color: int,
    ) -> None:
        """Draw a rectangle with a ``border_size`` thick frame.

        The frame is painted first (top, bottom, left, right strips), then
        the interior inset by ``border_size`` on every side.
        """
        _check_corners(x1, y1, x2, y2)

        self.draw_line(x1, y1, x2 - x1, border_size, outside_color)
        self.draw_line(x1, y2 - border_size, x2 - x1, border_size, outside_color)
        self.draw_line(x1, y1, border_size, y2 - y1, outside_color)
        self.draw_line(x2 - border_size, y1, border_size, y2 - y1, outside_color)
        self.draw_rect(
            x1 + border_size,
            y1 + border_size,
            x2 - border_size,
            y2 - border_size,
            inside_color,
        )

    def get_circle_points(self, x_center: int, y_center: int, r: int) -> list[CirclePair]:
        """Midpoint circle outline as ``(lower, upper)`` pairs sharing an x.

        Each step of the first octant yields four pairs; together they
        cover all eight octants.  The first point of a pair has the larger y.
        """
        x = r
        y = 0
        p = 1 - r

        pairs: list[CirclePair] = []
        while x >= y:
            pairs.extend(
                (
                    (Coordinate(x_center + x, y_center + y), Coordinate(x_center + x, y_center - y)),
                    (Coordinate(x_center - x, y_center + y), Coordinate(x_center - x, y_center - y)),
                    (Coordinate(x_center + y, y_center + x), Coordinate(x_center + y, y_center - x)),
                    (Coordinate(x_center - y, y_center + x), Coordinate(x_center - y, y_center - x)),
                )
            )

            y += 1
            if p < 0:
                p += 2 * y + 1
            else:
                x -= 1
                p += 2 * (y - x + 1)

        return pairs

    def draw_filled_circle(self, x_center: int, y_center: int, r: int, color: int) -> None:
        self._fill_spans(self.get_circle_points(x_center, y_center, r), color)

    def draw_bordered_circle(
        self,
        x_center: int,
        y_center: int,
        r: int,
        border_size: int,
        inside_color: int,
        outside_color: int,
    ) -> None:
        """Draw a filled circle of radius ``r - border_size`` with a border.

        The border is stamped as short strips around each outline point, so
        it shows gaps where the octants meet.
        """
        outline = self.get_circle_points(x_center, y_center, r)
        inner = self.get_circle_points(x_center, y_center, r - border_size)

        for lower, upper in outline:
            self.draw_line(lower.x, lower.y - 1, border_size, 1, outside_color)
            self.draw_line(lower.x - 1, lower.y, 1, border_size, outside_color)
            self.draw_line(upper.x, upper.y, border_size, 1, outside_color)
            self.draw_line(upper.x, upper.y, 1, border_size, outside_color)

        self._fill_spans(inner, inside_color)

    def _fill_spans(self, pairs: list[CirclePair], color: int) -> None:
        for lower, upper in pairs:
            for i in range(lower.y - upper.y + 1):
                self.set_pixel(upper.x, upper.y + i, color)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def finalize(self) -> None:
        """Recompute the Adler32 trailer and all chunk CRCs."""
        checksum.finalize(self._buffer, self.layout)
        log.debug("canvas_finalized", size=len(self._buffer))

    def get_buffer(self) -> bytes:
        """Finalize and return the whole buffer, header bytes included."""
        self.finalize()
        return bytes(self._buffer)

    def set_buffer(self, data: bytes | bytearray) -> None:
        """Replace the buffer with a copy of *data*, e.g. from an identical canvas.

        The palette mapping is kept as is; it is not re-read from *data*.
        """
        if len(data) != len(self._buffer):
            raise ValueError(
                f"Buffer length {len(data)} does not match canvas buffer "
                f"length {len(self._buffer)}"
            )
        self._buffer = bytearray(data)
        log.debug("buffer_replaced", size=len(data))

    def get_base64(self) -> str:
        return base64.b64encode(self.get_buffer()).decode("ascii")

    def get_data_url(self) -> str:
        """Base64 image as a ``data:`` URL, usable as an ``<img>`` source."""
        return "data:image/png;base64," + self.get_base64()


class PNGImage(Image):
    """An :class:`Image` whose buffer is a complete PNG file."""

    def __init__(
        self,
        width: int,
        height: int,
        depth: int | None = None,
        background_color: RGBColor | None = None,
        check_bounds: bool | None = None,
    ) -> None:
        super().__init__(
            width,
            height,
            depth=depth,
            background_color=background_color,
            header=PNG_SIGNATURE,
            check_bounds=check_bounds,
        )


def _check_corners(x1: int, y1: int, x2: int, y2: int) -> None:
    if x1 > x2 or y1 > y2:
        raise InvalidGeometryError(
            f"Rectangle ({x1},{y1})-({x2},{y2}) must have x2 >= x1 and y2 >= y1"
        )
