"""Exceptions raised by the encoder."""


class InvalidGeometryError(ValueError):
    """A rectangle was given with its second corner before its first."""


class PixelOutOfBoundsError(IndexError):
    """A pixel coordinate fell outside the canvas while bounds checking is on."""
