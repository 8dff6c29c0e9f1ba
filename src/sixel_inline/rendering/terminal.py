# =============================================================================
# Terminal Capability Detection
# =============================================================================
# Decides whether the output terminal understands Sixel graphics.
#
# This is a heuristic based on environment variables only. No query sequence
# (DA1 etc.) is ever sent to the terminal.
#
# Decision order:
#   1. SIXEL_INLINE_FORCE override ("1"/"true" -> on, anything else -> off)
#   2. Redirected stdin/stdout -> off (pipes, CI, pagers)
#   3. Terminal identification ($TERM, $TERM_PROGRAM, $LC_TERMINAL, ...)
#
# The answer is computed once per provider and never re-evaluated, even if
# the environment changes afterwards.
# =============================================================================

import logging
import os
import shutil
import sys
from collections.abc import Mapping
from functools import cached_property
from typing import TextIO

logger = logging.getLogger(__name__)

# Explicit override, honoured before any heuristic
OVERRIDE_ENV_VAR = "SIXEL_INLINE_FORCE"

# Substrings of $TERM / $TERM_PROGRAM / $LC_TERMINAL for terminals that ship
# working Sixel support
SIXEL_TERMINALS = (
    "mlterm",
    "foot",
    "contour",
    "wezterm",
    "yaft",
    "mintty",
    "konsole",
    "iterm",
    "sixel",
)

# Terminals with their own image protocol that ignore or mangle Sixel
NON_SIXEL_TERMINALS = (
    "kitty",
    "ghostty",
)

# Windows Terminal session + profile id pair (profile-aware releases have Sixel)
WINDOWS_TERMINAL_SESSION_VAR = "WT_SESSION"
WINDOWS_TERMINAL_PROFILE_VAR = "WT_PROFILE_ID"

DEFAULT_TERMINAL_WIDTH = 80


def _is_tty(stream: TextIO | None) -> bool:
    """Returns True if the stream is attached to a terminal."""
    if stream is None:
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        # Closed or replaced streams (pytest capture, daemons)
        return False


class TerminalCapabilities:
    """
    Answers "can this terminal show Sixel images?".

    Construct one at program start and hand it to the renderer. Tests pass
    their own environment mapping and streams instead of touching the real
    process state.

    Usage:
        >>> caps = TerminalCapabilities()
        >>> if caps.supports_sixel():
        ...     print(sixel_data)

    Attributes:
        environ: Environment variables consulted by the heuristic.
        stdin: Input stream checked for redirection.
        stdout: Output stream checked for redirection.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout

    def supports_sixel(self) -> bool:
        """Returns the (memoised) Sixel support decision."""
        return self._sixel

    @cached_property
    def _sixel(self) -> bool:
        result = self._detect_sixel()
        logger.debug(f"Sixel support: {result}")
        return result

    def _detect_sixel(self) -> bool:
        # 1. User override always wins, even over redirection
        override = self.environ.get(OVERRIDE_ENV_VAR)
        if override is not None:
            return override == "1" or override.lower() == "true"

        # 2. Never emit graphics into pipes or files
        if not (_is_tty(self.stdin) and _is_tty(self.stdout)):
            return False

        # 3. Terminal identification
        ids = " ".join(
            self.environ.get(name, "")
            for name in ("TERM", "TERM_PROGRAM", "LC_TERMINAL")
        ).lower()

        if self.environ.get("KITTY_WINDOW_ID"):
            return False
        if any(name in ids for name in NON_SIXEL_TERMINALS):
            return False
        if any(name in ids for name in SIXEL_TERMINALS):
            return True

        if (
            self.environ.get(WINDOWS_TERMINAL_SESSION_VAR)
            and self.environ.get(WINDOWS_TERMINAL_PROFILE_VAR)
        ):
            return True

        return False

    def terminal_width(self) -> int:
        """
        Width of the output terminal in columns.

        Falls back to 80 when the size can't be determined or is reported
        as zero (redirected output, some CI runners).
        """
        columns = shutil.get_terminal_size((0, 0)).columns
        return columns if columns > 0 else DEFAULT_TERMINAL_WIDTH


# =============================================================================
# Process-wide Default
# =============================================================================

_default: TerminalCapabilities | None = None


def default_capabilities() -> TerminalCapabilities:
    """
    Returns the process-wide capability provider, creating it on first use.

    Written once, then only read.
    """
    global _default
    if _default is None:
        _default = TerminalCapabilities()
    return _default


def reset_default_capabilities() -> None:
    """Forget the process-wide provider. Useful for testing."""
    global _default
    _default = None
