"""Chunk layout for an indexed-colour PNG carrying a stored zlib stream.

Every byte position the encoder touches is fixed by width, height and
palette depth, so the whole file is laid out once up front::

    [header] IHDR PLTE tRNS IDAT IEND

Inside IDAT the zlib stream is a 2-byte header, one or more stored deflate
blocks and the Adler32 trailer.  The logical pixel plane (one filter byte
plus ``width`` index bytes per row) is split into 65535-byte segments,
each preceded by a 5-byte block header.  ``position_offset`` maps a
logical plane position to its buffer offset and is used for every pixel
read, write and checksum pass.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

BIT_DEPTH = 8
COLOR_TYPE_INDEXED = 3

CHUNK_OVERHEAD = 12  # length + type + crc
IHDR_PAYLOAD_SIZE = 13

ZLIB_HEADER_SIZE = 2
ADLER32_SIZE = 4
BLOCK_SIZE = 0xFFFF
BLOCK_HEADER_SIZE = 5


def zlib_header() -> int:
    """Return the 16-bit zlib header: deflate, 32K window, FLEVEL 3.

    The FCHECK bits are chosen so the value is a multiple of 31.
    """
    header = ((8 + (7 << 4)) << 8) | (3 << 6)
    header += 31 - (header % 31)
    return header


def plane_offset(stream_offset: int, position: int) -> int:
    """Offset of logical plane *position* in a stream of stored blocks."""
    return stream_offset + BLOCK_HEADER_SIZE * (position // BLOCK_SIZE + 1) + position


@dataclass(frozen=True)
class ChunkSpan:
    """Position of one chunk (length, type, payload, crc) in the buffer."""

    name: bytes
    offset: int
    size: int

    @property
    def payload_offset(self) -> int:
        return self.offset + 8

    @property
    def payload_size(self) -> int:
        return self.size - CHUNK_OVERHEAD

    @property
    def crc_offset(self) -> int:
        return self.offset + self.size - 4


@dataclass(frozen=True)
class StoredBlock:
    """One stored deflate block inside the IDAT payload."""

    offset: int  # of the 5-byte block header
    length: int
    final: bool

    @property
    def data_offset(self) -> int:
        return self.offset + BLOCK_HEADER_SIZE


@dataclass(frozen=True)
class ChunkLayout:
    """Byte offsets of all chunks and stored blocks for one image."""

    width: int
    height: int
    depth: int
    ihdr: ChunkSpan
    plte: ChunkSpan
    trns: ChunkSpan
    idat: ChunkSpan
    iend: ChunkSpan
    blocks: tuple[StoredBlock, ...]

    @classmethod
    def compute(cls, width: int, height: int, depth: int, origin: int = 0) -> ChunkLayout:
        """Lay out the chunks for a ``width x height`` image.

        *origin* is the number of caller header bytes that precede IHDR.
        """
        plane_size = height * (width + 1)
        block_count = -(-plane_size // BLOCK_SIZE)
        idat_payload = (
            ZLIB_HEADER_SIZE + plane_size + BLOCK_HEADER_SIZE * block_count + ADLER32_SIZE
        )

        ihdr = ChunkSpan(b"IHDR", origin, CHUNK_OVERHEAD + IHDR_PAYLOAD_SIZE)
        plte = ChunkSpan(b"PLTE", ihdr.offset + ihdr.size, CHUNK_OVERHEAD + 3 * depth)
        trns = ChunkSpan(b"tRNS", plte.offset + plte.size, CHUNK_OVERHEAD + depth)
        idat = ChunkSpan(b"IDAT", trns.offset + trns.size, CHUNK_OVERHEAD + idat_payload)
        iend = ChunkSpan(b"IEND", idat.offset + idat.size, CHUNK_OVERHEAD)

        stream_offset = idat.payload_offset + ZLIB_HEADER_SIZE
        blocks = []
        for k in range(block_count):
            start = k * BLOCK_SIZE
            blocks.append(
                StoredBlock(
                    offset=plane_offset(stream_offset, start) - BLOCK_HEADER_SIZE,
                    length=min(BLOCK_SIZE, plane_size - start),
                    final=k == block_count - 1,
                )
            )

        return cls(
            width=width,
            height=height,
            depth=depth,
            ihdr=ihdr,
            plte=plte,
            trns=trns,
            idat=idat,
            iend=iend,
            blocks=tuple(blocks),
        )

    # ------------------------------------------------------------------
    # Derived positions
    # ------------------------------------------------------------------

    @property
    def plane_size(self) -> int:
        """Logical pixel plane size: a filter byte plus one index per pixel, per row."""
        return self.height * (self.width + 1)

    @property
    def stream_offset(self) -> int:
        """First byte after the zlib header."""
        return self.idat.payload_offset + ZLIB_HEADER_SIZE

    @property
    def adler_offset(self) -> int:
        return self.idat.crc_offset - ADLER32_SIZE

    @property
    def total_size(self) -> int:
        """Buffer size including the caller header bytes."""
        return self.iend.offset + self.iend.size

    def chunks(self) -> tuple[ChunkSpan, ...]:
        return (self.ihdr, self.plte, self.trns, self.idat, self.iend)

    def position_offset(self, position: int) -> int:
        """Map a logical pixel plane position to its buffer offset.

        Skips one 5-byte block header for every 65535-byte segment started
        so far, including the current one.
        """
        return plane_offset(self.stream_offset, position)

    # ------------------------------------------------------------------
    # Static content
    # ------------------------------------------------------------------

    def write_headers(self, buffer: bytearray) -> None:
        """Write chunk lengths and types, IHDR, the zlib header and block headers.

        Palette, transparency, pixel and checksum bytes are left alone.
        """
        for chunk in self.chunks():
            struct.pack_into(">I4s", buffer, chunk.offset, chunk.payload_size, chunk.name)

        struct.pack_into(
            ">IIBBBBB",
            buffer,
            self.ihdr.payload_offset,
            self.width,
            self.height,
            BIT_DEPTH,
            COLOR_TYPE_INDEXED,
            0,  # compression
            0,  # filter
            0,  # interlace
        )

        struct.pack_into(">H", buffer, self.idat.payload_offset, zlib_header())

        for block in self.blocks:
            struct.pack_into(
                "<BHH",
                buffer,
                block.offset,
                1 if block.final else 0,
                block.length,
                ~block.length & 0xFFFF,
            )
