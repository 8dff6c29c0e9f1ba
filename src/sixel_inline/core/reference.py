# =============================================================================
# Image Reference Model
# =============================================================================
# A located image reference inside free-form markup text. Two notations are
# recognised:
#
#   Markdown:  ![alt text](filename)
#   Wiki:      {{image(filename)}}  or  {{thumbnail(filename)}}
#
# Offsets are Python string indices, so text[ref.start:ref.end] is exactly
# the markup that was matched.
# =============================================================================

from dataclasses import dataclass
from enum import Enum, auto


class ReferenceKind(Enum):
    """Which notation produced a reference."""
    MARKDOWN = auto()           # ![alt](filename)
    WIKI_IMAGE = auto()         # {{image(filename)}}
    WIKI_THUMBNAIL = auto()     # {{thumbnail(filename)}}


@dataclass(frozen=True)
class ImageReference:
    """
    An image reference found in text.

    Attributes:
        start: Offset of the first character of the markup.
        end: Offset one past the last character of the markup.
        filename: Referenced filename, surrounding whitespace trimmed.
        kind: Which notation was used.
    """
    start: int
    end: int
    filename: str
    kind: ReferenceKind

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Empty reference span {self.start}..{self.end}")

    @property
    def is_thumbnail(self) -> bool:
        """Returns True for {{thumbnail(...)}} references."""
        return self.kind is ReferenceKind.WIKI_THUMBNAIL

    def span(self, text: str) -> str:
        """Returns the matched markup from the source text."""
        return text[self.start:self.end]
