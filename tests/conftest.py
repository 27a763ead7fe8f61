import pytest

from indexpng import Image, PNGImage, RGBColor


@pytest.fixture
def small_canvas() -> Image:
    """A 3x3 canvas, two palette slots, opaque black background."""
    return Image(3, 3, depth=2, background_color=RGBColor(r=0, g=0, b=0))


@pytest.fixture
def png_canvas() -> PNGImage:
    """A 16x16 PNG with an opaque white background."""
    return PNGImage(16, 16, depth=8, background_color=RGBColor(r=255, g=255, b=255))
