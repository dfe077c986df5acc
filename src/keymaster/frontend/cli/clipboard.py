"""Optional clipboard copy of generated keys (``/c /clip``)."""

from __future__ import annotations

import logging

import pyperclip


logger = logging.getLogger(__name__)


def copy_key(hex_key: str) -> bool:
    """Put ``hex_key`` on the system clipboard.

    The key has already been printed when this runs, so a missing clipboard
    mechanism is reported on the log and not raised.

    Returns:
        True if the clipboard now holds the key.
    """
    try:
        pyperclip.copy(hex_key)
    except pyperclip.PyperclipException as exc:
        logger.warning("could not copy key to clipboard: %s", exc)
        return False
    return True
