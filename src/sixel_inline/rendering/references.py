# =============================================================================
# Image Reference Detection
# =============================================================================
# Finds image markup in free-form text and pairs it with attachments.
#
# Two regex families run independently over the same text:
#   - Markdown:  ![alt](filename)
#   - Wiki:      {{thumbnail(filename)}} / {{image(filename)}}
#
# Their matches are merged into one list ordered by start offset. Malformed
# markup simply doesn't match and stays plain text; detection never fails.
# =============================================================================

import re
from collections.abc import Iterable

from sixel_inline.core import Attachment, ImageReference, ReferenceKind

# ![alt text](filename)
MARKDOWN_IMAGE_RE = re.compile(r"!\[.*?\]\(([^)]+)\)")

# {{thumbnail(filename)}} or {{image(filename)}}, whitespace tolerant
WIKI_IMAGE_RE = re.compile(r"{{\s*(thumbnail|image)\s*\(([^)]+)\)\s*}}")


def detect_references(text: str | None) -> list[ImageReference]:
    """
    Locate every image reference in text.

    Args:
        text: Markup to scan. None or whitespace-only yields no references.

    Returns:
        References sorted by start offset. Overlapping matches from the two
        notations are both kept.

    Example:
        >>> [r.filename for r in detect_references("See ![x](a.png) and {{image(b.png)}}")]
        ['a.png', 'b.png']
    """
    if not text or not text.strip():
        return []

    references = [
        ImageReference(
            start=match.start(),
            end=match.end(),
            filename=match.group(1).strip(),
            kind=ReferenceKind.MARKDOWN,
        )
        for match in MARKDOWN_IMAGE_RE.finditer(text)
    ]

    for match in WIKI_IMAGE_RE.finditer(text):
        kind = (
            ReferenceKind.WIKI_THUMBNAIL
            if match.group(1) == "thumbnail"
            else ReferenceKind.WIKI_IMAGE
        )
        references.append(ImageReference(
            start=match.start(),
            end=match.end(),
            filename=match.group(2).strip(),
            kind=kind,
        ))

    # Stable sort keeps markdown before wiki on equal offsets
    references.sort(key=lambda ref: ref.start)
    return references


def referenced_filenames(text: str | None) -> list[str]:
    """
    Distinct filenames referenced by image markup, in first-seen order.
    """
    return list(dict.fromkeys(ref.filename for ref in detect_references(text)))


def is_image_content_type(content_type: str | None) -> bool:
    """Returns True if the MIME type starts with "image/" (any case)."""
    if not content_type or not content_type.strip():
        return False
    return content_type.lower().startswith("image/")


def match_attachments(
    attachments: Iterable[Attachment] | None,
    filenames: Iterable[str] | None,
) -> list[Attachment]:
    """
    Select the image attachments whose filename was referenced.

    Matching is exact on the filename; no case folding, no extension
    sniffing. Non-image attachments are dropped even when the name matches.

    Args:
        attachments: Candidate attachments.
        filenames: Filenames referenced by the text.

    Returns:
        Matching attachments in their original order. Empty when either
        input is None or empty.
    """
    if not attachments or not filenames:
        return []

    wanted = set(filenames)
    if not wanted:
        return []

    return [
        attachment
        for attachment in attachments
        if attachment.filename in wanted
        and is_image_content_type(attachment.content_type)
    ]


def find_attachment(
    attachments: Iterable[Attachment] | None,
    filename: str,
) -> Attachment | None:
    """Returns the first image attachment named `filename`, or None."""
    matches = match_attachments(attachments, [filename])
    return matches[0] if matches else None
