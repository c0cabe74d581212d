"""CLI helpers for aeharness.

Utilities used by the command-line interface: endpoint sanitization for safe
display, OSC-8 terminal hyperlinks when supported, and message emitters that
write to stderr with emoji->ASCII fallbacks.
"""

from .endpoints import sanitize_endpoint
from .hyperlinks import hyperlink
from .messages import error, success, warn

__all__ = ["sanitize_endpoint", "warn", "success", "error", "hyperlink"]
