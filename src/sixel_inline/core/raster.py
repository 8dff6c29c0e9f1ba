# =============================================================================
# Raster Models
# =============================================================================
# In-memory image representations used by the rendering pipeline:
#
#   DecodedRaster   -> interleaved 8-bit RGB samples straight from the decoder
#   Color / Palette -> the bounded set of colours chosen by the quantizer
#   QuantizedRaster -> one palette index per pixel, ready for Sixel encoding
#
# All of these are created and thrown away within a single image render.
# Nothing here is cached between calls.
# =============================================================================

from dataclasses import dataclass, field
from typing import NamedTuple

# Sixel colour registers are addressed 0..255
MAX_PALETTE_SIZE = 256


class Color(NamedTuple):
    """
    An 8-bit RGB colour.

    Being a NamedTuple, it is immutable and hashable, so it can be used
    directly as a key while counting colour frequencies.
    """
    r: int
    g: int
    b: int

    def distance_sq(self, r: int, g: int, b: int) -> int:
        """Squared Euclidean distance to another colour in RGB space."""
        dr = self.r - r
        dg = self.g - g
        db = self.b - b
        return dr * dr + dg * dg + db * db

    def to_percent(self) -> tuple[int, int, int]:
        """
        Rescale the components from 0-255 to the 0-100 range Sixel uses.

        Uses truncating integer division so that 255 -> 100, 128 -> 50.
        """
        return (
            self.r * 100 // 255,
            self.g * 100 // 255,
            self.b * 100 // 255,
        )


BLACK = Color(0, 0, 0)

Palette = tuple[Color, ...]


@dataclass
class DecodedRaster:
    """
    A decoded image as interleaved RGB bytes.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        pixels: Row-major samples, `channels` bytes per pixel.
        channels: Samples per pixel. Always 3 (RGB) for decoder output.

    Raises:
        ValueError: If the buffer length doesn't match the dimensions.
    """
    width: int
    height: int
    pixels: bytes
    channels: int = 3

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid raster size {self.width}x{self.height}")
        expected = self.width * self.height * self.channels
        if len(self.pixels) != expected:
            raise ValueError(
                f"Pixel buffer holds {len(self.pixels)} bytes, "
                f"expected {expected} for {self.width}x{self.height}x{self.channels}"
            )

    @property
    def pixel_count(self) -> int:
        """Number of pixels in the raster."""
        return self.width * self.height

    def pixel(self, x: int, y: int) -> Color:
        """Returns the colour at (x, y)."""
        offset = (y * self.width + x) * self.channels
        return Color(*self.pixels[offset:offset + 3])


@dataclass
class QuantizedRaster:
    """
    An image reduced to a palette plus one palette index per pixel.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        indices: Row-major palette indices, one byte per pixel.
        palette: The colours the indices refer to (never empty).
    """
    width: int
    height: int
    indices: bytes
    palette: Palette = field(default=(BLACK,))

    def __post_init__(self) -> None:
        if not self.palette:
            raise ValueError("Palette must contain at least one colour")
        if len(self.palette) > MAX_PALETTE_SIZE:
            raise ValueError(
                f"Palette has {len(self.palette)} colours, "
                f"at most {MAX_PALETTE_SIZE} are allowed"
            )
        if len(self.indices) != self.width * self.height:
            raise ValueError(
                f"Index buffer holds {len(self.indices)} entries, "
                f"expected {self.width * self.height}"
            )
        if self.indices and max(self.indices) >= len(self.palette):
            raise ValueError("Palette index out of range")

    def color_at(self, x: int, y: int) -> Color:
        """Returns the palette colour assigned to (x, y)."""
        return self.palette[self.indices[y * self.width + x]]
