"""Tests for the chunk layout builder.

Run with:
    python -m pytest tests/test_layout.py -v
"""

from __future__ import annotations

import struct

import pytest

from indexpng.encoder.layout import (
    BLOCK_SIZE,
    ChunkLayout,
    zlib_header,
)


def _written(layout: ChunkLayout) -> bytearray:
    buffer = bytearray(layout.total_size)
    layout.write_headers(buffer)
    return buffer


class TestZlibHeader:
    def test_header_is_multiple_of_31(self):
        assert zlib_header() % 31 == 0

    def test_header_declares_deflate_with_32k_window(self):
        header = zlib_header()
        assert header == 0x78DA
        assert (header >> 8) & 0x0F == 8
        assert header >> 12 == 7


class TestChunkOffsets:
    def test_small_image_offsets(self):
        layout = ChunkLayout.compute(3, 3, 2)

        assert (layout.ihdr.offset, layout.ihdr.size) == (0, 25)
        assert (layout.plte.offset, layout.plte.size) == (25, 18)
        assert (layout.trns.offset, layout.trns.size) == (43, 14)
        # zlib header + 12 plane bytes + one block header + adler32
        assert layout.idat.payload_size == 2 + 12 + 5 + 4
        assert layout.idat.offset == 57
        assert layout.iend.offset == 57 + 35
        assert layout.total_size == 57 + 35 + 12

    def test_origin_shifts_every_chunk(self):
        plain = ChunkLayout.compute(5, 4, 3)
        shifted = ChunkLayout.compute(5, 4, 3, origin=8)

        for a, b in zip(plain.chunks(), shifted.chunks()):
            assert b.offset == a.offset + 8
            assert b.size == a.size
        assert shifted.total_size == plain.total_size + 8
        assert shifted.position_offset(7) == plain.position_offset(7) + 8

    @pytest.mark.parametrize("depth", [1, 2, 16, 256])
    def test_palette_chunks_scale_with_depth(self, depth):
        layout = ChunkLayout.compute(4, 4, depth)
        assert layout.plte.payload_size == 3 * depth
        assert layout.trns.payload_size == depth

    def test_adler_sits_before_idat_crc(self):
        layout = ChunkLayout.compute(3, 3, 2)
        assert layout.adler_offset == layout.idat.crc_offset - 4
        assert layout.adler_offset + 4 == layout.idat.offset + layout.idat.size - 4


class TestStoredBlocks:
    def test_single_block(self):
        layout = ChunkLayout.compute(3, 3, 2)

        assert len(layout.blocks) == 1
        block = layout.blocks[0]
        assert block.final is True
        assert block.length == 12
        assert block.offset == layout.stream_offset

    def test_plane_split_into_65535_byte_segments(self):
        layout = ChunkLayout.compute(299, 300, 4)  # 90000 plane bytes

        assert layout.plane_size == 90000
        assert [b.length for b in layout.blocks] == [BLOCK_SIZE, 90000 - BLOCK_SIZE]
        assert [b.final for b in layout.blocks] == [False, True]
        first, second = layout.blocks
        assert second.offset == first.data_offset + BLOCK_SIZE

    def test_exact_multiple_has_no_empty_trailing_block(self):
        layout = ChunkLayout.compute(BLOCK_SIZE - 1, 1, 1)

        assert layout.plane_size == BLOCK_SIZE
        assert len(layout.blocks) == 1
        assert layout.blocks[0].final is True
        assert layout.blocks[0].length == BLOCK_SIZE

    def test_position_offset_skips_block_headers(self):
        layout = ChunkLayout.compute(299, 300, 4)
        first, second = layout.blocks

        assert layout.position_offset(0) == first.data_offset
        assert layout.position_offset(BLOCK_SIZE - 1) == first.data_offset + BLOCK_SIZE - 1
        assert layout.position_offset(BLOCK_SIZE) == second.data_offset
        assert layout.position_offset(89999) == layout.adler_offset - 1


class TestWriteHeaders:
    def test_ihdr_contents(self):
        layout = ChunkLayout.compute(640, 480, 16)
        buffer = _written(layout)

        length, name = struct.unpack_from(">I4s", buffer, layout.ihdr.offset)
        assert (length, name) == (13, b"IHDR")
        fields = struct.unpack_from(">IIBBBBB", buffer, layout.ihdr.payload_offset)
        assert fields == (640, 480, 8, 3, 0, 0, 0)

    def test_chunk_lengths_and_types(self):
        layout = ChunkLayout.compute(7, 2, 5)
        buffer = _written(layout)

        for chunk in layout.chunks():
            length, name = struct.unpack_from(">I4s", buffer, chunk.offset)
            assert name == chunk.name
            assert length == chunk.payload_size
        assert struct.unpack_from(">I", buffer, layout.iend.offset)[0] == 0

    def test_zlib_header_written_at_idat_start(self):
        layout = ChunkLayout.compute(7, 2, 5)
        buffer = _written(layout)
        assert buffer[layout.idat.payload_offset:layout.stream_offset] == b"\x78\xda"

    def test_block_headers(self):
        layout = ChunkLayout.compute(299, 300, 4)
        buffer = _written(layout)
        first, second = layout.blocks

        assert bytes(buffer[first.offset:first.data_offset]) == b"\x00\xff\xff\x00\x00"
        tail = 90000 - BLOCK_SIZE
        assert bytes(buffer[second.offset:second.data_offset]) == struct.pack(
            "<BHH", 1, tail, tail ^ 0xFFFF
        )
