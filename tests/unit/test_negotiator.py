"""
Unit tests for terminal capability negotiation.
"""

from unittest.mock import Mock, patch

import pytest

from fontview.terminal import negotiator
from fontview.terminal.negotiator import (
    Negotiator,
    Protocol,
    negotiate,
    parse_device_attributes,
    query_sixel_support,
)


def _no_sixel():
    return False


class TestNegotiate:
    """Test the ordered environment checks."""

    @pytest.mark.parametrize(
        "environ",
        [
            {"TERM": "screen-256color"},
            {"TERM": "tmux-256color"},
            {"TERM": "xterm-256color", "TMUX": "/tmp/tmux-1000/default,1,0"},
        ],
    )
    def test_multiplexer_is_unsupported(self, environ):
        """A multiplexer wins even over a probe that reports Sixel."""
        probe = Mock(return_value=True)
        assert negotiate(environ, probe) is Protocol.UNSUPPORTED
        probe.assert_not_called()

    def test_multiplexer_beats_kitty(self):
        environ = {"TERM": "screen", "KITTY_WINDOW_ID": "1"}
        assert negotiate(environ, _no_sixel) is Protocol.UNSUPPORTED

    @pytest.mark.parametrize(
        "environ",
        [{"TERM": "xterm-kitty"}, {"TERM": "xterm-256color", "KITTY_WINDOW_ID": "3"}],
    )
    def test_kitty(self, environ):
        assert negotiate(environ, _no_sixel) is Protocol.KITTY

    def test_kitty_beats_iterm(self):
        environ = {"TERM": "xterm-kitty", "TERM_PROGRAM": "WezTerm"}
        assert negotiate(environ, _no_sixel) is Protocol.KITTY

    @pytest.mark.parametrize(
        "environ",
        [
            {"TERM_PROGRAM": "iTerm.app"},
            {"TERM_PROGRAM": "WezTerm"},
            {"LC_TERMINAL": "iTerm2"},
        ],
    )
    def test_iterm_and_wezterm(self, environ):
        probe = Mock(return_value=True)
        assert negotiate(environ, probe) is Protocol.ITERM
        probe.assert_not_called()

    def test_sixel_probe(self):
        assert negotiate({"TERM": "xterm"}, lambda: True) is Protocol.SIXEL

    def test_nothing_supported(self):
        assert negotiate({"TERM": "xterm"}, _no_sixel) is Protocol.UNSUPPORTED
        assert not Protocol.UNSUPPORTED.supported
        assert Protocol.SIXEL.supported

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.delenv("TMUX", raising=False)
        monkeypatch.setenv("TERM", "xterm-kitty")
        assert negotiate(sixel_probe=_no_sixel) is Protocol.KITTY


class TestNegotiator:
    """Test the once-per-process decision."""

    def test_protocol_computed_once(self):
        probe = Mock(return_value=True)
        terminal = Negotiator({"TERM": "xterm"}, probe)

        assert terminal.protocol is Protocol.SIXEL
        assert terminal.protocol is Protocol.SIXEL
        probe.assert_called_once()


class TestSixelProbe:
    """Test device attribute parsing and the probe's failure paths."""

    def test_parse_reply(self):
        assert parse_device_attributes("\x1b[?62;4;22c") == {"62", "4", "22"}

    def test_parse_reply_with_noise(self):
        assert parse_device_attributes("junk\x1b[?1;2c") == {"1", "2"}

    def test_parse_garbage(self):
        assert parse_device_attributes("no reply") == set()

    def test_no_controlling_terminal(self):
        with patch.object(negotiator.os, "open", side_effect=OSError("no tty")):
            assert query_sixel_support() is False
