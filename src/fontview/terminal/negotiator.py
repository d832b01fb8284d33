"""
Terminal Capability Negotiation
===============================

Decides which inline graphics protocol the hosting terminal speaks.

Checks run in a fixed order and the first hit wins: a multiplexer that cannot
carry graphics, Kitty, iTerm2/WezTerm, then a Sixel device attribute query.
"""

import logging
import os
import re
import select
from collections.abc import Callable, Mapping
from enum import Enum
from functools import cached_property

logger = logging.getLogger(__name__)

# Primary device attributes query and its reply, e.g. "\x1b[?62;4;22c"
DA1_QUERY = "\x1b[c"
_DA1_REPLY_RE = re.compile(r"\x1b\[\?([0-9;]*)c")
SIXEL_ATTRIBUTE = "4"
PROBE_TIMEOUT = 0.5


class Protocol(Enum):
    """Inline graphics protocols, plus the no-graphics outcome."""

    KITTY = "kitty"
    ITERM = "iterm"
    SIXEL = "sixel"
    UNSUPPORTED = "unsupported"

    @property
    def supported(self) -> bool:
        return self is not Protocol.UNSUPPORTED


def is_multiplexer(environ: Mapping[str, str]) -> bool:
    term = environ.get("TERM", "").lower()
    return term.startswith(("screen", "tmux")) or bool(environ.get("TMUX"))


def is_kitty(environ: Mapping[str, str]) -> bool:
    return environ.get("TERM", "").lower() == "xterm-kitty" or bool(environ.get("KITTY_WINDOW_ID"))


def is_iterm_or_wezterm(environ: Mapping[str, str]) -> bool:
    program = environ.get("TERM_PROGRAM", "").lower()
    return program in ("iterm.app", "wezterm") or environ.get("LC_TERMINAL", "") == "iTerm2"


def parse_device_attributes(reply: str) -> set[str]:
    """Extract the attribute list from a DA1 reply."""
    match = _DA1_REPLY_RE.search(reply)
    if match is None:
        return set()
    return {attr for attr in match.group(1).split(";") if attr}


def query_sixel_support(timeout: float = PROBE_TIMEOUT) -> bool:
    """
    Ask the controlling terminal whether it supports Sixel graphics.

    Sends a primary device attributes query in raw mode and looks for
    attribute 4 in the reply. Returns False when there is no terminal or no
    timely reply.
    """
    try:
        import termios
        import tty
    except ImportError:
        return False

    try:
        fd = os.open("/dev/tty", os.O_RDWR | os.O_NOCTTY)
    except OSError:
        return False

    try:
        saved = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            os.write(fd, DA1_QUERY.encode())
            reply = b""
            while not reply.endswith(b"c"):
                ready, _, _ = select.select([fd], [], [], timeout)
                if not ready:
                    break
                chunk = os.read(fd, 64)
                if not chunk:
                    break
                reply += chunk
        finally:
            termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
    except (OSError, termios.error) as e:
        logger.debug(f"Sixel probe failed: {e}")
        return False
    finally:
        os.close(fd)

    attributes = parse_device_attributes(reply.decode("ascii", errors="replace"))
    logger.debug(f"Terminal device attributes: {sorted(attributes)}")
    return SIXEL_ATTRIBUTE in attributes


def negotiate(
    environ: Mapping[str, str] | None = None,
    sixel_probe: Callable[[], bool] = query_sixel_support,
) -> Protocol:
    """
    Pick the single usable graphics protocol.

    Args:
        environ: Environment variables (defaults to ``os.environ``)
        sixel_probe: Callable that queries the terminal for Sixel support

    Returns:
        The negotiated Protocol; ``Protocol.UNSUPPORTED`` when none applies
    """
    environ = os.environ if environ is None else environ

    if is_multiplexer(environ):
        logger.debug("Terminal multiplexer detected; inline graphics unsupported")
        return Protocol.UNSUPPORTED
    if is_kitty(environ):
        return Protocol.KITTY
    if is_iterm_or_wezterm(environ):
        return Protocol.ITERM
    if sixel_probe():
        return Protocol.SIXEL
    return Protocol.UNSUPPORTED


class Negotiator:
    """Negotiates the protocol once and reuses the answer for the whole run."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        sixel_probe: Callable[[], bool] = query_sixel_support,
    ):
        self.environ = environ
        self.sixel_probe = sixel_probe

    @cached_property
    def protocol(self) -> Protocol:
        protocol = negotiate(self.environ, self.sixel_probe)
        logger.debug(f"Negotiated graphics protocol: {protocol.value}")
        return protocol
