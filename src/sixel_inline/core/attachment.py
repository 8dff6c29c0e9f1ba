# =============================================================================
# Attachment Model
# =============================================================================
# Describes a file attached to the document being rendered. The renderer never
# owns attachments: they come from the surrounding application (an issue
# tracker, a wiki page, a local directory) and are treated as read-only.
#
# An attachment is "renderable" when:
#   - Its filename is referenced by image markup in the text
#   - Its content type is an image/* MIME type
# =============================================================================

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Attachment:
    """
    A file attached to a document.

    Attributes:
        filename: Original filename, matched exactly against image references.
        content_type: MIME type (e.g., "image/png", "application/pdf").
        content_url: Where the surrounding application can fetch the bytes.
                     Only meaningful to the fetcher; the renderer never
                     dereferences it itself.
        size: Size in bytes (0 if unknown).
        data: The attachment bytes, when already loaded in memory.
        id: Identifier assigned by the surrounding application.

    Example:
        >>> attachment = Attachment(
        ...     filename="plan.png",
        ...     content_type="image/png",
        ...     content_url="https://tracker.example.com/attachments/7/plan.png",
        ... )
    """
    filename: str
    content_type: str
    content_url: str | None = None
    size: int = 0

    # Bytes carried inline (local files, tests)
    data: bytes | None = None

    id: int | None = None

    @classmethod
    def from_path(cls, path: Path) -> "Attachment":
        """
        Build an attachment from a local file.

        The content type is guessed from the file extension; unknown
        extensions become "application/octet-stream".

        Args:
            path: File to describe.

        Returns:
            Attachment carrying the file's bytes in `data`.
        """
        content_type, _ = mimetypes.guess_type(path.name)
        data = path.read_bytes()
        return cls(
            filename=path.name,
            content_type=content_type or "application/octet-stream",
            content_url=path.resolve().as_uri(),
            size=len(data),
            data=data,
        )


def load_directory_attachments(directory: Path) -> list[Attachment]:
    """
    Describe every regular file in a directory as an attachment.

    Subdirectories are not descended into. Files are returned sorted by
    name so the result is stable across platforms.

    Args:
        directory: Directory to scan.

    Returns:
        List of attachments, one per file.
    """
    return [
        Attachment.from_path(path)
        for path in sorted(directory.iterdir())
        if path.is_file()
    ]
