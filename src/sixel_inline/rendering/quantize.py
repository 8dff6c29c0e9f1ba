# =============================================================================
# Colour Quantization
# =============================================================================
# Reduces an RGB raster to at most 256 colours, which is all the Sixel
# colour registers can address.
#
# Algorithm (popularity quantizer):
#   1. Count every distinct (r, g, b) triple
#   2. Keep the `max_colors` most frequent ones as the palette
#   3. Map each pixel to the palette entry at the smallest squared
#      Euclidean distance in RGB space
#
# If the image has no more distinct colours than the palette allows, every
# pixel keeps its exact colour.
# =============================================================================

from collections import Counter

from sixel_inline.core import (
    BLACK,
    MAX_PALETTE_SIZE,
    Color,
    DecodedRaster,
    Palette,
    QuantizedRaster,
)


def _iter_colors(raster: DecodedRaster):
    """Yield one Color per pixel, row-major."""
    pixels = raster.pixels
    step = raster.channels
    for offset in range(0, len(pixels), step):
        yield Color(pixels[offset], pixels[offset + 1], pixels[offset + 2])


def build_palette(counts: Counter, max_colors: int) -> Palette:
    """
    Pick the most frequent colours.

    Ties keep first-encounter order (Counter preserves insertion order and
    the sort is stable).

    Args:
        counts: Colour -> occurrence count.
        max_colors: Palette size limit.

    Returns:
        The palette, or a single black entry if `counts` is empty.
    """
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    palette = tuple(color for color, _ in ranked[:max_colors])
    return palette or (BLACK,)


def nearest_index(palette: Palette, color: Color) -> int:
    """Index of the palette entry closest to `color`; first minimum wins."""
    best_index = 0
    best_distance = None
    r, g, b = color
    for index, candidate in enumerate(palette):
        distance = candidate.distance_sq(r, g, b)
        if best_distance is None or distance < best_distance:
            best_distance = distance
            best_index = index
            if distance == 0:
                break
    return best_index


def quantize(
    raster: DecodedRaster,
    max_colors: int = MAX_PALETTE_SIZE,
    *,
    dither: bool = False,
) -> QuantizedRaster:
    """
    Reduce a raster to a palette plus per-pixel palette indices.

    Args:
        raster: RGB raster to quantize.
        max_colors: Maximum palette size, clamped to 1..256.
        dither: Reserved for error-diffusion dithering.

    Returns:
        The quantized raster. Its palette is never empty.

    Raises:
        NotImplementedError: If dithering is requested.
    """
    if dither:
        raise NotImplementedError("Dithering is not supported")

    max_colors = min(max(1, max_colors), MAX_PALETTE_SIZE)

    counts = Counter(_iter_colors(raster))
    palette = build_palette(counts, max_colors)

    # Nearest lookup once per distinct colour, not once per pixel
    lookup = {color: nearest_index(palette, color) for color in counts}
    indices = bytes(lookup[color] for color in _iter_colors(raster))

    return QuantizedRaster(
        width=raster.width,
        height=raster.height,
        indices=indices,
        palette=palette,
    )
