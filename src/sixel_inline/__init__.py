# =============================================================================
# sixel-inline: Inline Images for Terminal Text
# =============================================================================
#
# sixel-inline prints issue descriptions, wiki pages and other markup to the
# terminal with the images they reference drawn in place, using the Sixel
# graphics protocol.
#
# Features:
#   - Markdown ![alt](file) and wiki {{image(file)}} / {{thumbnail(file)}}
#   - Environment-based Sixel capability detection with an override
#   - Popularity colour quantization (lossless up to 256 colours)
#   - Pure-Python Sixel encoder with run-length compression
#   - Plain-text fallback on pipes and non-Sixel terminals
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "sixel-inline"

from sixel_inline.core import Attachment, ImageReference, ReferenceKind
from sixel_inline.rendering import InlineImageRenderer, TerminalCapabilities

__all__ = [
    "Attachment",
    "ImageReference",
    "ReferenceKind",
    "InlineImageRenderer",
    "TerminalCapabilities",
    "__version__",
    "__app_name__",
]
