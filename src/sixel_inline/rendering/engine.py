# =============================================================================
# Inline Image Rendering Engine
# =============================================================================
# Writes text to the terminal with referenced images drawn in place.
#
# For each image reference found in the text, in document order:
#   1. Write the plain text before it unchanged
#   2. Write the reference markup itself, highlighted
#   3. If images are enabled, the terminal speaks Sixel and a matching image
#      attachment exists:
#        fetch -> decode -> resize -> quantize -> encode -> write + newline
#
# A failing image (fetch error, undecodable bytes) is skipped; the text
# around it is always written.
# =============================================================================

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from rich.console import COLOR_SYSTEMS, Console
from rich.style import Style

from sixel_inline.config import RenderingConfig
from sixel_inline.core import Attachment, ImageReference
from sixel_inline.rendering.images import decode_image, resize_raster
from sixel_inline.rendering.quantize import quantize
from sixel_inline.rendering.references import detect_references, find_attachment
from sixel_inline.rendering.sixel import encode_sixel
from sixel_inline.rendering.terminal import TerminalCapabilities, default_capabilities

logger = logging.getLogger(__name__)

# Returns the raw bytes of an attachment, or None if unavailable
Fetcher = Callable[[Attachment], bytes | None]


def attachment_data(attachment: Attachment) -> bytes | None:
    """Default fetcher: the bytes the attachment already carries."""
    return attachment.data


class InlineImageRenderer:
    """
    Renders text with inline Sixel images to a Rich console.

    The renderer holds no per-document state, so one instance can render
    any number of documents.

    Usage:
        >>> renderer = InlineImageRenderer(fetcher=api.download)
        >>> renderer.render(issue.description, issue.attachments, show_images=True)

    Attributes:
        fetcher: Callable returning the raw bytes of an attachment.
        capabilities: Terminal capability provider.
        console: Output sink.
        config: Rendering configuration (widths, palette size, style).
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        capabilities: TerminalCapabilities | None = None,
        console: Console | None = None,
        config: RenderingConfig | None = None,
    ) -> None:
        """
        Initialize the renderer.

        Args:
            fetcher: Attachment byte source. Defaults to `Attachment.data`.
            capabilities: Capability provider. Defaults to the process-wide one.
            console: Output console. Defaults to a console on stdout.
            config: Rendering configuration. Defaults to RenderingConfig().
        """
        self.fetcher = fetcher or attachment_data
        self.capabilities = capabilities or default_capabilities()
        self.console = console or Console(highlight=False)
        self.config = config or RenderingConfig()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def render(
        self,
        text: str | None,
        attachments: Sequence[Attachment] | None,
        show_images: bool,
        max_width: int | None = None,
    ) -> None:
        """
        Write text with inline images to the console.

        Args:
            text: Markup text to render.
            attachments: Attachments the text may reference.
            show_images: Draw referenced images (terminal permitting).
            max_width: Maximum image width in pixels. Overrides the
                       configured image/thumbnail widths when given.

        Raises:
            ValueError: If max_width is given and less than 1.
        """
        if max_width is not None and max_width < 1:
            raise ValueError(f"max_width must be at least 1, got {max_width}")

        if not text or not text.strip():
            return

        if not attachments:
            self._write(text)
            self._write("\n")
            return

        references = detect_references(text)
        draw_images = bool(
            show_images and references and self.capabilities.supports_sixel()
        )
        prefetched: dict[int, str] | None = None
        if draw_images and self.config.prefetch_workers > 1:
            prefetched = self._prefetch_images(references, attachments, max_width)

        last_end = 0
        for index, ref in enumerate(references):
            # Text before the reference
            if ref.start > last_end:
                self._write(text[last_end:ref.start])

            # The reference markup itself; overlapping spans only add
            # what hasn't been written yet
            span_start = max(ref.start, last_end)
            if ref.end > span_start:
                self._write_highlighted(text[span_start:ref.end])
            last_end = max(last_end, ref.end)

            if not draw_images:
                continue
            if prefetched is not None:
                sequence = prefetched.get(index)
            else:
                sequence = self._render_reference(ref, attachments, max_width)
            if sequence:
                self._write(sequence)
                self._write("\n")

        # Text after the last reference
        if last_end < len(text):
            self._write(text[last_end:])

        self._write("\n")

    def prepare_image(self, attachment: Attachment, max_width: int) -> str | None:
        """
        Run one attachment through the image pipeline.

        Args:
            attachment: Image attachment to render.
            max_width: Maximum width in pixels.

        Returns:
            The Sixel escape sequence, or None if the image couldn't be
            fetched or decoded.
        """
        try:
            data = self.fetcher(attachment)
        except Exception as e:
            # Fetchers are supplied by the caller and may fail any way
            logger.debug(f"Failed to fetch {attachment.filename}: {e}")
            return None

        if not data:
            logger.debug(f"No data for {attachment.filename}")
            return None

        raster = decode_image(data)
        if raster is None:
            logger.debug(f"Could not decode {attachment.filename}")
            return None

        raster = resize_raster(raster, max_width)
        quantized = quantize(raster, self.config.max_colors)
        logger.debug(
            f"Encoding {attachment.filename}: {quantized.width}x{quantized.height}, "
            f"{len(quantized.palette)} colours"
        )
        return encode_sixel(quantized)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _width_for(self, ref: ImageReference, max_width: int | None) -> int:
        """Pixel width limit for a reference."""
        if max_width is not None:
            return max_width
        if ref.is_thumbnail:
            return self.config.thumbnail_width
        return self.config.image_width

    def _render_reference(
        self,
        ref: ImageReference,
        attachments: Sequence[Attachment],
        max_width: int | None,
    ) -> str | None:
        """Sixel sequence for one reference, or None if nothing to draw."""
        attachment = find_attachment(attachments, ref.filename)
        if attachment is None:
            return None
        return self.prepare_image(attachment, self._width_for(ref, max_width))

    def _prefetch_images(
        self,
        references: list[ImageReference],
        attachments: Sequence[Attachment],
        max_width: int | None,
    ) -> dict[int, str]:
        """
        Encode every renderable reference concurrently.

        Results are keyed by reference position so the caller can still
        write them in document order.

        Returns:
            Reference position -> Sixel sequence, for images that rendered.
        """
        jobs = []
        for index, ref in enumerate(references):
            attachment = find_attachment(attachments, ref.filename)
            if attachment is not None:
                jobs.append((index, attachment, self._width_for(ref, max_width)))

        if not jobs:
            return {}

        workers = min(self.config.prefetch_workers, len(jobs))
        logger.debug(f"Preparing {len(jobs)} images with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(
                lambda job: self.prepare_image(job[1], job[2]), jobs
            ))

        return {
            index: sequence
            for (index, _, _), sequence in zip(jobs, results)
            if sequence
        }

    def _write(self, data: str) -> None:
        """Write text or escape sequences to the console unmodified."""
        self.console.file.write(data)
        self.console.file.flush()

    def _write_highlighted(self, markup: str) -> None:
        """
        Write image reference markup in the highlight style.

        The span itself goes out byte-for-byte; only the style's SGR codes
        are added, and only when the console has a colour system.
        """
        style = Style.parse(self.config.highlight_style)
        if self.console.no_color:
            style = style.without_color
        # None (plain output) makes Style.render return the text unchanged
        color_system = COLOR_SYSTEMS.get(self.console.color_system or "")
        self._write(style.render(markup, color_system=color_system))
