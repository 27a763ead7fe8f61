"""Palette manager: RGBA colours to PLTE/tRNS indices."""

from __future__ import annotations

import structlog

from indexpng.encoder.layout import ChunkLayout

log = structlog.get_logger()


def pack_color(red: int, green: int, blue: int, alpha: int) -> int:
    """Pack a colour into a 32-bit ``alpha:red:green:blue`` key."""
    return (alpha << 24) | (red << 16) | (green << 8) | blue


class Palette:
    """Insertion-ordered colour table with a fixed capacity.

    Indices are handed out sequentially the first time a colour is seen and
    never change.  Once ``depth`` colours are taken, any new colour maps to
    index 0 and the table is left as it is.
    """

    def __init__(self, layout: ChunkLayout) -> None:
        self.layout = layout
        self.depth = layout.depth
        self._indices: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._indices)

    @property
    def is_full(self) -> bool:
        return len(self._indices) >= self.depth

    def lookup_or_assign(
        self, buffer: bytearray, red: int, green: int, blue: int, alpha: int
    ) -> int:
        """Return the index for a colour, registering it if there is room."""
        key = pack_color(red, green, blue, alpha)
        index = self._indices.get(key)
        if index is not None:
            return index

        if self.is_full:
            log.debug("palette_exhausted", depth=self.depth, color=f"{key:08x}")
            return 0

        index = len(self._indices)
        rgb = self.layout.plte.payload_offset + 3 * index
        buffer[rgb:rgb + 3] = bytes((red, green, blue))
        buffer[self.layout.trns.payload_offset + index] = alpha
        self._indices[key] = index
        return index

    def colors(self) -> list[tuple[int, int, int, int]]:
        """Registered colours as ``(r, g, b, a)`` tuples, in index order."""
        return [
            ((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF, (key >> 24) & 0xFF)
            for key in self._indices
        ]
