"""Tests for Sixel capability detection."""

import io

import pytest

from sixel_inline.rendering.terminal import (
    DEFAULT_TERMINAL_WIDTH,
    OVERRIDE_ENV_VAR,
    TerminalCapabilities,
    default_capabilities,
    reset_default_capabilities,
)


class FakeStream(io.StringIO):
    """StringIO that claims (or denies) being a terminal."""

    def __init__(self, tty: bool) -> None:
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def make_caps(environ=None, tty=True) -> TerminalCapabilities:
    return TerminalCapabilities(
        environ=environ or {},
        stdin=FakeStream(tty),
        stdout=FakeStream(tty),
    )


class TestOverride:
    """Tests for the explicit override variable."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "True"])
    def test_override_on(self, value):
        assert make_caps({OVERRIDE_ENV_VAR: value}).supports_sixel() is True

    @pytest.mark.parametrize("value", ["0", "false", "yes", "", "2"])
    def test_override_off(self, value):
        assert make_caps({OVERRIDE_ENV_VAR: value}).supports_sixel() is False

    def test_override_on_wins_over_redirection(self):
        caps = make_caps({OVERRIDE_ENV_VAR: "1"}, tty=False)
        assert caps.supports_sixel() is True

    def test_override_off_wins_over_known_terminal(self):
        caps = make_caps({OVERRIDE_ENV_VAR: "0", "TERM": "mlterm"})
        assert caps.supports_sixel() is False


class TestRedirection:
    """Tests for piped / redirected streams."""

    def test_stdout_redirected(self):
        caps = TerminalCapabilities(
            environ={"TERM": "foot"},
            stdin=FakeStream(True),
            stdout=FakeStream(False),
        )
        assert caps.supports_sixel() is False

    def test_stdin_redirected(self):
        caps = TerminalCapabilities(
            environ={"TERM": "foot"},
            stdin=FakeStream(False),
            stdout=FakeStream(True),
        )
        assert caps.supports_sixel() is False

    def test_closed_stream_counts_as_redirected(self):
        stream = FakeStream(True)
        stream.isatty = lambda: (_ for _ in ()).throw(ValueError("closed"))
        caps = TerminalCapabilities(
            environ={"TERM": "foot"},
            stdin=FakeStream(True),
            stdout=stream,
        )
        assert caps.supports_sixel() is False


class TestTerminalIdentification:
    """Tests for the environment heuristic."""

    @pytest.mark.parametrize("environ", [
        {"TERM": "mlterm"},
        {"TERM": "foot"},
        {"TERM": "foot-extra"},
        {"TERM": "xterm-256color", "TERM_PROGRAM": "WezTerm"},
        {"TERM": "contour"},
        {"TERM": "yaft-256color"},
        {"TERM_PROGRAM": "mintty"},
        {"TERM": "xterm-sixel"},
        {"TERM": "xterm-256color", "TERM_PROGRAM": "iTerm.app"},
        {"LC_TERMINAL": "iTerm2"},
    ])
    def test_sixel_terminals(self, environ):
        assert make_caps(environ).supports_sixel() is True

    @pytest.mark.parametrize("environ", [
        {"TERM": "xterm-kitty"},
        {"TERM_PROGRAM": "kitty"},
        {"TERM": "xterm-256color", "KITTY_WINDOW_ID": "1"},
        {"TERM": "xterm-ghostty"},
    ])
    def test_proprietary_protocol_terminals(self, environ):
        assert make_caps(environ).supports_sixel() is False

    def test_windows_terminal_with_profile(self):
        environ = {
            "WT_SESSION": "0f6a6d3c-2f6b-4b0c-9d5e-2d7a1c0e8f11",
            "WT_PROFILE_ID": "{61c54bbd-c2c6-5271-96e7-009a87ff44bf}",
        }
        assert make_caps(environ).supports_sixel() is True

    def test_windows_terminal_without_profile(self):
        environ = {"WT_SESSION": "0f6a6d3c-2f6b-4b0c-9d5e-2d7a1c0e8f11"}
        assert make_caps(environ).supports_sixel() is False

    @pytest.mark.parametrize("environ", [
        {},
        {"TERM": "xterm-256color"},
        {"TERM": "dumb"},
        {"TERM_PROGRAM": "vscode"},
    ])
    def test_unknown_terminals_default_off(self, environ):
        assert make_caps(environ).supports_sixel() is False


class TestMemoisation:
    """The decision is made once per provider."""

    def test_not_reevaluated_after_env_change(self):
        environ = {"TERM": "mlterm"}
        caps = make_caps(environ)
        assert caps.supports_sixel() is True

        environ["TERM"] = "xterm-kitty"
        environ[OVERRIDE_ENV_VAR] = "0"
        assert caps.supports_sixel() is True

    def test_default_provider_is_shared(self):
        assert default_capabilities() is default_capabilities()

    def test_reset_default_provider(self):
        first = default_capabilities()
        reset_default_capabilities()
        assert default_capabilities() is not first

    def test_default_provider_reads_process_env(self, monkeypatch):
        monkeypatch.setenv(OVERRIDE_ENV_VAR, "1")
        assert default_capabilities().supports_sixel() is True


class TestTerminalWidth:
    """Tests for terminal_width()."""

    def test_positive(self):
        assert make_caps().terminal_width() > 0

    def test_columns_env(self, monkeypatch):
        monkeypatch.setenv("COLUMNS", "132")
        assert make_caps().terminal_width() == 132

    def test_fallback(self, monkeypatch):
        monkeypatch.setenv("COLUMNS", "0")
        monkeypatch.setattr(
            "shutil.os.get_terminal_size",
            lambda *args: (_ for _ in ()).throw(OSError("not a tty")),
        )
        assert make_caps().terminal_width() == DEFAULT_TERMINAL_WIDTH
