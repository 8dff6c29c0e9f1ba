# =============================================================================
# Command-Line Interface
# =============================================================================
# Renders a text file with its images inline:
#
#   sixel-inline notes.md --attachments ./files --image
#
# Every regular file in the attachments directory is offered to the renderer
# as an attachment; its content type is guessed from the extension.
#
# Special commands:
#   --paths         Print configuration paths and exit
#   --detect        Print whether this terminal gets Sixel images and exit
#   --init-config   Write a default config file and exit
# =============================================================================

import argparse
import logging
import sys
from pathlib import Path

from sixel_inline import __app_name__, __version__
from sixel_inline.config import Config, ConfigError, print_paths
from sixel_inline.core import load_directory_attachments
from sixel_inline.rendering import InlineImageRenderer, TerminalCapabilities
from sixel_inline.rendering.terminal import OVERRIDE_ENV_VAR

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="Print text with its referenced images drawn inline (Sixel)",
    )

    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Text file to render ('-' or omitted reads stdin)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-a", "--attachments",
        type=Path,
        help="Directory whose files are available as attachments",
    )

    parser.add_argument(
        "--image",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Draw referenced images (default: show_images from config)",
    )

    parser.add_argument(
        "--max-width",
        type=int,
        help="Maximum image width in pixels (overrides config widths)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--detect",
        action="store_true",
        help=f"Print whether Sixel output is enabled and exit (override with ${OVERRIDE_ENV_VAR})",
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config file and exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    args = parser.parse_args(argv)
    if args.max_width is not None and args.max_width < 1:
        parser.error("--max-width must be a positive number of pixels")
    return args


def setup_logging(debug: bool) -> None:
    """Log to stderr so stdout carries only rendered output."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_text(path: Path | None) -> str:
    """Read the document from a file, or stdin for None / '-'."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for sixel-inline.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --detect, --init-config)
        3. Loads configuration
        4. Renders the document

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)
    setup_logging(args.debug)

    if args.paths:
        print_paths()
        return 0

    if args.init_config:
        path = Config().save(args.config)
        print(f"Wrote default config to {path}")
        return 0

    capabilities = TerminalCapabilities()
    if args.detect:
        print("sixel" if capabilities.supports_sixel() else "none")
        return 0

    try:
        config = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    try:
        text = _read_text(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    attachments = []
    if args.attachments:
        if not args.attachments.is_dir():
            print(f"Not a directory: {args.attachments}", file=sys.stderr)
            return 1
        try:
            attachments = load_directory_attachments(args.attachments)
        except OSError as e:
            print(f"Cannot read attachments in {args.attachments}: {e}", file=sys.stderr)
            return 1
        logger.debug(f"Loaded {len(attachments)} attachments from {args.attachments}")

    show_images = config.rendering.show_images if args.image is None else args.image

    renderer = InlineImageRenderer(
        capabilities=capabilities,
        config=config.rendering,
    )
    renderer.render(text, attachments, show_images, max_width=args.max_width)
    return 0


if __name__ == "__main__":
    sys.exit(main())
