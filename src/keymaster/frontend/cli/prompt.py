"""Masked password input for file commands."""

from __future__ import annotations

import getpass


def read_password(prompt: str = "Please enter a password: ") -> str:
    # getpass reads from the controlling terminal without echoing
    return getpass.getpass(prompt)
