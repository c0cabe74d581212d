"""OSC-8 hyperlink utilities for the aeharness CLI.

Detects whether the active text stream supports OSC-8 terminal hyperlinks and
renders URLs (documentation, explorer links) as clickable links, falling back
to plain text when unsupported. Pure formatting only.
"""

import os
import sys
from typing import TextIO

OSC8_TERMINALS = frozenset({"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"})


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether ``stream`` (default stdout) supports OSC-8 links.

    Non-TTY streams never do. Otherwise a conservative allowlist of terminal
    identifiers is checked.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, text: str | None = None) -> str:
    """Return ``text`` (default: the URL) as an OSC-8 hyperlink to ``url``.

    Falls back to the plain URL when the terminal does not support links.
    """
    if not supports_osc8():
        return url
    return f"\x1b]8;;{url}\x07{text or url}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL
