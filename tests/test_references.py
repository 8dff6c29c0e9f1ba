"""Unit tests for image reference detection and attachment matching."""

import pytest

from sixel_inline.core import Attachment, ImageReference, ReferenceKind
from sixel_inline.rendering.references import (
    detect_references,
    find_attachment,
    is_image_content_type,
    match_attachments,
    referenced_filenames,
)


# ---------------------------------------------------------------------------
# detect_references()
# ---------------------------------------------------------------------------


class TestDetectReferences:
    """Tests for locating image markup in text."""

    @pytest.mark.parametrize("text,filename", [
        ("![alt text](image.png)", "image.png"),
        ("![](screenshot.jpg)", "screenshot.jpg"),
        ("![画像の説明](日本語ファイル名.png)", "日本語ファイル名.png"),
        ("{{thumbnail(diagram.png)}}", "diagram.png"),
        ("{{image(photo.jpeg)}}", "photo.jpeg"),
    ])
    def test_single_reference(self, text, filename):
        refs = detect_references(text)
        assert len(refs) == 1
        assert refs[0].filename == filename

    @pytest.mark.parametrize("text", [
        "Plain text only",
        "[link](http://example.com)",
        "{{code}}",
        "![broken(image.png)",
    ])
    def test_no_reference(self, text):
        assert detect_references(text) == []

    @pytest.mark.parametrize("text", [None, "", "   ", "\n\t\n"])
    def test_empty_input(self, text):
        assert detect_references(text) == []

    def test_markdown_offsets(self):
        text = "See ![diagram](plan.png) below."
        (ref,) = detect_references(text)
        assert ref.start == 4
        assert ref.end == 24
        assert ref.span(text) == "![diagram](plan.png)"
        assert ref.kind is ReferenceKind.MARKDOWN

    def test_thumbnail_kind(self):
        (ref,) = detect_references("{{thumbnail(chart.png)}}")
        assert ref.kind is ReferenceKind.WIKI_THUMBNAIL
        assert ref.filename == "chart.png"
        assert ref.is_thumbnail

    def test_image_kind(self):
        (ref,) = detect_references("{{image(chart.png)}}")
        assert ref.kind is ReferenceKind.WIKI_IMAGE
        assert not ref.is_thumbnail

    def test_wiki_whitespace_tolerated(self):
        text = "{{  thumbnail ( chart.png )  }}"
        (ref,) = detect_references(text)
        assert ref.filename == "chart.png"
        assert ref.span(text) == text

    def test_markdown_filename_trimmed(self):
        (ref,) = detect_references("![x](  spaced.png  )")
        assert ref.filename == "spaced.png"

    def test_merged_in_document_order(self):
        text = (
            "{{image(c.png)}} first\n"
            "![a](a.png) then\n"
            "{{thumbnail(b.png)}} and ![d](d.png)"
        )
        refs = detect_references(text)
        assert [r.filename for r in refs] == ["c.png", "a.png", "b.png", "d.png"]
        starts = [r.start for r in refs]
        assert starts == sorted(starts)

    def test_multiple_references(self):
        text = """
## Overview
![screenshot 1](screen1.png)
Some explanation.

{{thumbnail(diagram.png)}}

And finally ![another](screen2.jpg) here.
"""
        refs = detect_references(text)
        assert [r.filename for r in refs] == ["screen1.png", "diagram.png", "screen2.jpg"]

    def test_duplicates_are_kept(self):
        refs = detect_references("![a](x.png) ![b](x.png)")
        assert len(refs) == 2

    def test_spans_are_non_empty(self):
        for ref in detect_references("![](a.png){{image(b.png)}}"):
            assert ref.start < ref.end


class TestImageReference:
    """Tests for the ImageReference model."""

    def test_rejects_empty_span(self):
        with pytest.raises(ValueError):
            ImageReference(start=3, end=3, filename="a.png", kind=ReferenceKind.MARKDOWN)


class TestReferencedFilenames:
    """Tests for referenced_filenames()."""

    def test_distinct_in_first_seen_order(self):
        text = "![a](b.png) {{image(a.png)}} ![c](b.png)"
        assert referenced_filenames(text) == ["b.png", "a.png"]

    def test_empty(self):
        assert referenced_filenames(None) == []


# ---------------------------------------------------------------------------
# Attachment matching
# ---------------------------------------------------------------------------


class TestIsImageContentType:
    """Tests for is_image_content_type()."""

    @pytest.mark.parametrize("content_type,expected", [
        ("image/png", True),
        ("image/jpeg", True),
        ("image/gif", True),
        ("image/webp", True),
        ("image/svg+xml", True),
        ("IMAGE/PNG", True),
        ("Image/Jpeg", True),
        ("text/plain", False),
        ("application/pdf", False),
        ("application/image", False),
        ("", False),
        ("   ", False),
        (None, False),
    ])
    def test_content_types(self, content_type, expected):
        assert is_image_content_type(content_type) is expected


class TestMatchAttachments:
    """Tests for match_attachments() and find_attachment()."""

    @pytest.fixture
    def attachments(self):
        return [
            Attachment(filename="screen1.png", content_type="image/png", id=1),
            Attachment(filename="document.pdf", content_type="application/pdf", id=2),
            Attachment(filename="diagram.png", content_type="image/png", id=3),
            Attachment(filename="notes.png", content_type="text/plain", id=4),
        ]

    def test_matches_by_filename(self, attachments):
        matches = match_attachments(attachments, ["screen1.png", "diagram.png"])
        assert [a.id for a in matches] == [1, 3]

    def test_non_images_excluded(self, attachments):
        matches = match_attachments(attachments, ["document.pdf", "notes.png"])
        assert matches == []

    def test_same_name_different_type(self):
        attachments = [
            Attachment(filename="test.png", content_type="image/png", id=1),
            Attachment(filename="test.png", content_type="text/plain", id=2),
            Attachment(filename="photo.jpg", content_type="image/jpeg", id=3),
        ]
        matches = match_attachments(attachments, ["test.png", "photo.jpg"])
        assert [a.id for a in matches] == [1, 3]

    def test_exact_filename_only(self, attachments):
        assert match_attachments(attachments, ["Screen1.png", "screen1"]) == []

    @pytest.mark.parametrize("attachments_arg,filenames", [
        (None, ["a.png"]),
        ([], ["a.png"]),
        ([Attachment(filename="a.png", content_type="image/png")], None),
        ([Attachment(filename="a.png", content_type="image/png")], []),
    ])
    def test_empty_inputs(self, attachments_arg, filenames):
        assert match_attachments(attachments_arg, filenames) == []

    def test_find_attachment_first_match(self):
        attachments = [
            Attachment(filename="a.png", content_type="text/plain", id=1),
            Attachment(filename="a.png", content_type="image/png", id=2),
            Attachment(filename="a.png", content_type="image/png", id=3),
        ]
        assert find_attachment(attachments, "a.png").id == 2

    def test_find_attachment_missing(self, attachments):
        assert find_attachment(attachments, "missing.png") is None
