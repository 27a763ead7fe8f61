"""Tests for palette assignment and the PLTE / tRNS payloads.

Run with:
    python -m pytest tests/test_palette.py -v
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from indexpng import Image, RGBColor
from indexpng.encoder.palette import pack_color

BLACK = RGBColor(r=0, g=0, b=0)
WHITE = RGBColor(r=255, g=255, b=255)
RED = RGBColor(r=255, g=0, b=0)


def _plte(canvas: Image) -> bytes:
    data = canvas.get_buffer()
    start = canvas.layout.plte.payload_offset
    return data[start:start + canvas.layout.plte.payload_size]


def _trns(canvas: Image) -> bytes:
    data = canvas.get_buffer()
    start = canvas.layout.trns.payload_offset
    return data[start:start + canvas.layout.trns.payload_size]


class TestPackColor:
    def test_key_layout(self):
        assert pack_color(0x11, 0x22, 0x33, 0x44) == 0x44112233


class TestAssignment:
    def test_background_takes_index_zero(self):
        canvas = Image(2, 2, depth=4, background_color=WHITE)
        assert canvas.background_color == 0
        assert canvas.palette.colors() == [(255, 255, 255, 255)]

    def test_default_background_is_transparent_black(self):
        canvas = Image(2, 2, depth=4)
        assert canvas.palette.colors() == [(0, 0, 0, 0)]

    def test_same_color_same_index(self):
        canvas = Image(2, 2, depth=4, background_color=BLACK)
        first = canvas.color(10, 20, 30, 40)
        second = canvas.color(10, 20, 30, 40)
        assert first == second == 1
        assert len(canvas.palette) == 2

    def test_alpha_distinguishes_colors(self):
        canvas = Image(2, 2, depth=4, background_color=BLACK)
        assert canvas.color(10, 20, 30, 255) != canvas.color(10, 20, 30, 128)

    def test_negative_alpha_means_opaque(self):
        canvas = Image(2, 2, depth=4, background_color=BLACK)
        assert canvas.color(9, 9, 9) == canvas.color(9, 9, 9, 255)

    def test_indices_follow_first_use(self):
        canvas = Image(2, 2, depth=4, background_color=BLACK)
        assert canvas.color(1, 1, 1) == 1
        assert canvas.color(2, 2, 2) == 2
        assert canvas.color(1, 1, 1) == 1
        assert canvas.color(3, 3, 3) == 3

    def test_plte_and_trns_payloads(self):
        canvas = Image(2, 2, depth=3, background_color=BLACK)
        canvas.color(255, 0, 0)
        canvas.color(0, 128, 255, 64)

        assert _plte(canvas) == bytes([0, 0, 0, 255, 0, 0, 0, 128, 255])
        assert _trns(canvas) == bytes([255, 255, 64])


class TestRGBColor:
    def test_alpha_fraction_rounds_half_up(self):
        canvas = Image(2, 2, depth=4, background_color=BLACK)
        index = canvas.create_rgb_color(RGBColor(r=1, g=2, b=3, a=0.5))
        assert _trns(canvas)[index] == 128

    def test_default_alpha_is_opaque(self):
        assert RGBColor(r=1, g=2, b=3).alpha_byte == 255

    @pytest.mark.parametrize(
        "fields",
        [
            {"r": 256, "g": 0, "b": 0},
            {"r": -1, "g": 0, "b": 0},
            {"r": 0, "g": 0, "b": 0, "a": 1.5},
            {"r": 0, "g": 0, "b": 0, "extra": 1},
        ],
    )
    def test_invalid_colors_rejected(self, fields):
        with pytest.raises(ValidationError):
            RGBColor(**fields)


class TestExhaustion:
    def test_extra_color_maps_to_zero(self):
        canvas = Image(2, 2, depth=2, background_color=BLACK)
        assert canvas.create_rgb_color(WHITE) == 1
        plte_before = _plte(canvas)

        assert canvas.create_rgb_color(RED) == 0
        assert len(canvas.palette) == 2
        assert _plte(canvas) == plte_before

    def test_known_colors_still_resolve_when_full(self):
        canvas = Image(2, 2, depth=2, background_color=BLACK)
        white = canvas.create_rgb_color(WHITE)
        canvas.create_rgb_color(RED)
        assert canvas.create_rgb_color(WHITE) == white
        assert canvas.palette.is_full

    def test_exhaustion_is_logged(self):
        canvas = Image(2, 2, depth=1, background_color=BLACK)
        with capture_logs() as logs:
            canvas.color(1, 2, 3)

        events = [entry for entry in logs if entry["event"] == "palette_exhausted"]
        assert len(events) == 1
        assert events[0]["depth"] == 1
        assert events[0]["color"] == "ff010203"
