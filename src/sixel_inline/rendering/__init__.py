# =============================================================================
# Rendering Module
# =============================================================================
# Inline image rendering for terminal text output.
#
# The rendering pipeline:
#   1. Detect image references in the text (Markdown and wiki notation)
#   2. Match them against image attachments
#   3. Check that the terminal understands Sixel
#   4. Decode, resize and quantize each referenced image
#   5. Encode it as Sixel and write it right after its reference
# =============================================================================

from sixel_inline.rendering.engine import InlineImageRenderer, attachment_data
from sixel_inline.rendering.images import decode_image, resize_raster
from sixel_inline.rendering.quantize import quantize
from sixel_inline.rendering.references import (
    detect_references,
    find_attachment,
    is_image_content_type,
    match_attachments,
    referenced_filenames,
)
from sixel_inline.rendering.sixel import SixelEncoder, encode_sixel
from sixel_inline.rendering.terminal import (
    TerminalCapabilities,
    default_capabilities,
    reset_default_capabilities,
)

__all__ = [
    "InlineImageRenderer",
    "attachment_data",
    "decode_image",
    "resize_raster",
    "quantize",
    "detect_references",
    "find_attachment",
    "is_image_content_type",
    "match_attachments",
    "referenced_filenames",
    "SixelEncoder",
    "encode_sixel",
    "TerminalCapabilities",
    "default_capabilities",
    "reset_default_capabilities",
]
