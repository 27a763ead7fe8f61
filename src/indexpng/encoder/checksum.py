"""CRC32 chunk trailers and the Adler32 zlib trailer.

Both are recomputed from scratch over the current buffer every time the
image is finalized; nothing tracks which bytes changed.
"""

from __future__ import annotations

import struct

from indexpng.encoder.layout import ChunkLayout, ChunkSpan

CRC_POLYNOMIAL = 0xEDB88320

ADLER_BASE = 65521
# Largest n such that 255n(n+1)/2 + (n+1)(BASE-1) fits in 32 bits.
ADLER_NMAX = 5552


def _build_crc_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = CRC_POLYNOMIAL ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return tuple(table)


CRC_TABLE: tuple[int, ...] = _build_crc_table()


def crc32(data: bytes | bytearray, crc: int = 0) -> int:
    """Table-driven IEEE CRC32, continuing from *crc*."""
    crc ^= 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def write_chunk_crc(buffer: bytearray, chunk: ChunkSpan) -> int:
    """Checksum the chunk's type and payload into its trailing 4 bytes."""
    value = crc32(buffer[chunk.offset + 4:chunk.crc_offset])
    struct.pack_into(">I", buffer, chunk.crc_offset, value)
    return value


class Adler32:
    """Running Adler32 with deferred modulo reduction."""

    def __init__(self) -> None:
        self.s1 = 1
        self.s2 = 0
        self._pending = ADLER_NMAX

    def update(self, data: bytes | bytearray) -> None:
        s1, s2, pending = self.s1, self.s2, self._pending
        for byte in data:
            s1 += byte
            s2 += s1
            pending -= 1
            if pending == 0:
                s1 %= ADLER_BASE
                s2 %= ADLER_BASE
                pending = ADLER_NMAX
        self.s1, self.s2, self._pending = s1, s2, pending

    @property
    def value(self) -> int:
        return ((self.s2 % ADLER_BASE) << 16) | (self.s1 % ADLER_BASE)


def write_adler32(buffer: bytearray, layout: ChunkLayout) -> int:
    """Checksum the logical pixel plane into the end of the IDAT payload.

    Stored blocks are visited in stream order, so the bytes are summed row
    by row, filter byte first, and the block headers are skipped.
    """
    adler = Adler32()
    for block in layout.blocks:
        adler.update(buffer[block.data_offset:block.data_offset + block.length])
    value = adler.value
    struct.pack_into(">I", buffer, layout.adler_offset, value)
    return value


def finalize(buffer: bytearray, layout: ChunkLayout) -> None:
    """Write the Adler32 trailer, then every chunk CRC (IDAT covers the trailer)."""
    write_adler32(buffer, layout)
    for chunk in layout.chunks():
        write_chunk_crc(buffer, chunk)
