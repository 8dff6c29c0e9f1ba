# =============================================================================
# Image Decoding and Resizing
# =============================================================================
# Turns encoded image bytes into raw RGB rasters and shrinks them to fit.
#
# The process:
#   1. Load image bytes with Pillow (PNG, JPEG, GIF, BMP, WebP, ...)
#   2. Normalise to 3-channel RGB (alpha dropped, grayscale expanded)
#   3. Downscale with nearest-neighbour sampling if wider than allowed
#
# Decoding failures are expected (corrupt uploads, unsupported formats) and
# are reported as None, not as exceptions.
# =============================================================================

import logging
from io import BytesIO

from sixel_inline.core import DecodedRaster

logger = logging.getLogger(__name__)


def decode_image(data: bytes | None) -> DecodedRaster | None:
    """
    Decode image bytes into an RGB raster.

    Args:
        data: Encoded image data (PNG, JPEG, GIF, etc.)

    Returns:
        The decoded raster, or None if the data can't be decoded.
    """
    from PIL import Image, UnidentifiedImageError

    if not data:
        return None

    try:
        with Image.open(BytesIO(data)) as image:
            # Animated formats: first frame only
            image.seek(0)
            rgb = image.convert("RGB")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
        EOFError,
    ) as e:
        logger.debug(f"Image decode failed: {e}")
        return None

    width, height = rgb.size
    return DecodedRaster(width=width, height=height, pixels=rgb.tobytes())


def resize_raster(raster: DecodedRaster, max_width: int) -> DecodedRaster:
    """
    Downscale a raster to at most `max_width` pixels wide.

    Aspect ratio is kept. Rasters that already fit are returned as-is;
    images are never enlarged. Sampling is nearest-neighbour: target pixel
    (x, y) takes source pixel (x * width // new_width, y * height // new_height).

    Args:
        raster: Raster to shrink.
        max_width: Maximum width in pixels.

    Returns:
        `raster` itself if it fits, otherwise a new raster.

    Raises:
        ValueError: If max_width is less than 1.
    """
    if max_width < 1:
        raise ValueError(f"max_width must be positive, got {max_width}")

    if raster.width <= max_width:
        return raster

    scale = max_width / raster.width
    new_width = max_width
    new_height = max(1, round(raster.height * scale))

    channels = raster.channels
    src = raster.pixels
    src_stride = raster.width * channels

    # Column offsets are the same for every row
    column_offsets = [
        (x * raster.width // new_width) * channels for x in range(new_width)
    ]

    out = bytearray(new_width * new_height * channels)
    pos = 0
    for y in range(new_height):
        row_start = (y * raster.height // new_height) * src_stride
        for offset in column_offsets:
            start = row_start + offset
            out[pos:pos + channels] = src[start:start + channels]
            pos += channels

    return DecodedRaster(
        width=new_width,
        height=new_height,
        pixels=bytes(out),
        channels=channels,
    )
