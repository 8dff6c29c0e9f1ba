# =============================================================================
# Sixel Encoding
# =============================================================================
# Serialises a quantized raster into the Sixel terminal graphics protocol.
#
# Stream layout:
#
#   ESC P 0;0;0q                       DCS introducer + raster attributes
#   #0;2;r;g;b #1;2;r;g;b ...          one colour register per palette entry
#   #<c><sixels>$ #<c><sixels>$ ... -  band 1: one row per colour, then next band
#   ...
#   ESC \                              string terminator
#
# A "sixel" character covers a 1x6 pixel column: bit i set means row i of
# the band is painted in the current colour. The value is offset by 63 ('?')
# to land in printable ASCII. Runs of identical characters are compressed
# with "!<count><char>".
#
# Output must be byte-identical across implementations for the same input,
# so all arithmetic here is integer.
# =============================================================================

from itertools import groupby

from sixel_inline.core import MAX_PALETTE_SIZE, DecodedRaster, QuantizedRaster
from sixel_inline.rendering.quantize import quantize

DCS = "\x1bP"           # Device Control String
ST = "\x1b\\"           # String Terminator
RASTER_HEADER = "0;0;0q"

SIXEL_OFFSET = 63       # '?', the empty sixel
SIXEL_HEIGHT = 6        # Pixels per sixel column

GRAPHICS_CR = "$"       # Back to the start of the current band
GRAPHICS_NL = "-"       # Down to the next band

# Runs longer than this are written as "!<count><char>"
RLE_THRESHOLD = 3


def encode_palette(quantized: QuantizedRaster) -> str:
    """Colour register definitions, RGB scaled to 0-100."""
    parts = []
    for index, color in enumerate(quantized.palette):
        r, g, b = color.to_percent()
        parts.append(f"#{index};2;{r};{g};{b}")
    return "".join(parts)


def rle_encode(chars: str) -> str:
    """
    Run-length compress a row of sixel characters.

    Example:
        >>> rle_encode("~~~~~??")
        '!5~??'
    """
    parts = []
    for char, run in groupby(chars):
        count = sum(1 for _ in run)
        if count > RLE_THRESHOLD:
            parts.append(f"!{count}{char}")
        else:
            parts.append(char * count)
    return "".join(parts)


def encode_band(quantized: QuantizedRaster, top: int) -> str:
    """
    Encode the 6-pixel band starting at row `top`.

    Only rows that exist are tested, so the last band of an image whose
    height isn't a multiple of 6 has its missing rows left empty.

    Returns:
        The band's colour rows followed by "-", or "" if no colour
        painted anything in the band.
    """
    width = quantized.width
    indices = quantized.indices
    rows = min(SIXEL_HEIGHT, quantized.height - top)

    # Per colour, the bit pattern of each column in this band
    columns: dict[int, list[int]] = {}
    for dy in range(rows):
        bit = 1 << dy
        row_start = (top + dy) * width
        for x in range(width):
            color = indices[row_start + x]
            bits = columns.get(color)
            if bits is None:
                bits = columns[color] = [0] * width
            bits[x] |= bit

    parts = []
    for color in range(len(quantized.palette)):
        bits = columns.get(color)
        if bits is None:
            continue
        row = "".join(chr(SIXEL_OFFSET + value) for value in bits)
        parts.append(f"#{color}{rle_encode(row)}{GRAPHICS_CR}")

    if not parts:
        return ""
    parts.append(GRAPHICS_NL)
    return "".join(parts)


def encode_sixel(quantized: QuantizedRaster) -> str:
    """
    Encode a quantized raster as a complete Sixel escape sequence.

    Pure function: no I/O, same input always gives the same string.

    Args:
        quantized: Raster and palette to encode.

    Returns:
        The sequence from ESC P to ESC \\.
    """
    parts = [DCS, RASTER_HEADER, encode_palette(quantized)]
    for top in range(0, quantized.height, SIXEL_HEIGHT):
        parts.append(encode_band(quantized, top))
    parts.append(ST)
    return "".join(parts)


class SixelEncoder:
    """
    Quantizes raw interleaved pixel data and encodes it as Sixel.

    Usage:
        >>> encoder = SixelEncoder(max_colors=16)
        >>> sequence = encoder.encode(rgb_bytes, width=10, height=10)

    Attributes:
        max_colors: Palette size limit, clamped to 2..256.
        use_dithering: Passed through to the quantizer.
    """

    def __init__(self, max_colors: int = MAX_PALETTE_SIZE, use_dithering: bool = False) -> None:
        self.max_colors = min(max(2, max_colors), MAX_PALETTE_SIZE)
        self.use_dithering = use_dithering

    def encode(
        self,
        pixel_data: bytes,
        width: int,
        height: int,
        channels: int = 3,
    ) -> str:
        """
        Encode raw pixel data.

        Args:
            pixel_data: Row-major samples, `channels` bytes per pixel.
                        With fewer than 3 channels the first sample is used
                        for the missing ones (grayscale); extra channels
                        (alpha) are ignored.
            width: Width in pixels.
            height: Height in pixels.
            channels: Samples per pixel (1-4).

        Returns:
            Complete Sixel escape sequence.

        Raises:
            ValueError: If `pixel_data` is shorter than the dimensions need.
        """
        if channels < 1:
            raise ValueError(f"channels must be positive, got {channels}")
        if len(pixel_data) < width * height * channels:
            raise ValueError("Insufficient pixel data")

        raster = DecodedRaster(
            width=width,
            height=height,
            pixels=_to_rgb(pixel_data, width * height, channels),
        )
        quantized = quantize(raster, self.max_colors, dither=self.use_dithering)
        return encode_sixel(quantized)


def _to_rgb(pixel_data: bytes, pixel_count: int, channels: int) -> bytes:
    """Repack 1-4 channel samples as RGB triples."""
    if channels == 3:
        return bytes(pixel_data[:pixel_count * 3])

    out = bytearray(pixel_count * 3)
    for i in range(pixel_count):
        src = i * channels
        r = pixel_data[src]
        g = pixel_data[src + 1] if channels > 1 else r
        b = pixel_data[src + 2] if channels > 2 else r
        out[i * 3:i * 3 + 3] = (r, g, b)
    return bytes(out)
