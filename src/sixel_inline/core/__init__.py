# =============================================================================
# sixel-inline Core Module
# =============================================================================
# Plain data models shared by the rendering pipeline. These have no external
# dependencies and can be imported anywhere without pulling in Pillow or Rich.
#
#   - Attachment: A file attached to the document (read-only descriptor)
#   - ImageReference: Image markup located in the text
#   - DecodedRaster / QuantizedRaster: Pixel buffers
#   - Color / Palette: Quantizer output
# =============================================================================

from sixel_inline.core.attachment import Attachment, load_directory_attachments
from sixel_inline.core.raster import (
    BLACK,
    MAX_PALETTE_SIZE,
    Color,
    DecodedRaster,
    Palette,
    QuantizedRaster,
)
from sixel_inline.core.reference import ImageReference, ReferenceKind

__all__ = [
    "Attachment",
    "load_directory_attachments",
    "BLACK",
    "MAX_PALETTE_SIZE",
    "Color",
    "DecodedRaster",
    "Palette",
    "QuantizedRaster",
    "ImageReference",
    "ReferenceKind",
]
