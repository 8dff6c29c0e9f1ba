# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the sixel-inline test suite.
# =============================================================================

import io

import pytest
from rich.console import Console

from sixel_inline.core import Attachment, DecodedRaster
from sixel_inline.rendering.terminal import reset_default_capabilities


def make_png(width: int, height: int, color=(255, 0, 0), mode: str = "RGB") -> bytes:
    """Encode a solid-colour PNG with Pillow."""
    from PIL import Image

    if mode == "RGBA":
        fill = (*color, 128)
    elif mode == "L":
        fill = color[0]
    else:
        fill = color
    image = Image.new(mode, (width, height), fill)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_raster(width: int, height: int, colors) -> DecodedRaster:
    """Build an RGB raster from a row-major list of (r, g, b) tuples."""
    pixels = bytes(component for color in colors for component in color)
    return DecodedRaster(width=width, height=height, pixels=pixels)


class FakeCapabilities:
    """Capability provider with a fixed answer and a call counter."""

    def __init__(self, sixel: bool) -> None:
        self.sixel = sixel
        self.calls = 0

    def supports_sixel(self) -> bool:
        self.calls += 1
        return self.sixel


@pytest.fixture(autouse=True)
def clean_default_capabilities():
    """Ensure no test sees another test's process-wide provider."""
    reset_default_capabilities()
    yield
    reset_default_capabilities()


@pytest.fixture(autouse=True)
def plain_console_env(monkeypatch):
    """Keep CI colour settings from styling captured output."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)
    monkeypatch.delenv("SIXEL_INLINE_FORCE", raising=False)


@pytest.fixture
def output():
    """In-memory output buffer."""
    return io.StringIO()


@pytest.fixture
def console(output):
    """A non-terminal Rich console writing to the `output` buffer."""
    return Console(file=output, force_terminal=False, color_system=None, width=80)


@pytest.fixture
def red_png():
    """A 10x10 solid red PNG."""
    return make_png(10, 10, (255, 0, 0))


@pytest.fixture
def plan_attachment(red_png):
    """The image attachment referenced as plan.png."""
    return Attachment(
        filename="plan.png",
        content_type="image/png",
        content_url="https://tracker.example.com/attachments/1/plan.png",
        size=len(red_png),
        data=red_png,
        id=1,
    )


@pytest.fixture
def temp_dir(tmp_path):
    """A temporary directory for test files."""
    return tmp_path
