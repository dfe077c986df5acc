"""Small helper to build the KeyMaster CLI configuration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping, Optional


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class CliConfig:
    """Runtime settings the CLI needs."""

    debug: bool = False
    log_level: int = logging.WARNING


def build_config(environ: Optional[Mapping[str, str]] = None) -> CliConfig:
    """
    Read CLI settings from the environment.

    - ``KEYMASTER_DEBUG``: when truthy, tracebacks are printed on errors and
      logging drops to DEBUG.
    - ``KEYMASTER_LOG_LEVEL``: logging level name (``DEBUG``, ``INFO``, ...).
      Unknown names fall back to ``WARNING``.

    Cipher parameters are deliberately not configurable here.
    """
    env = os.environ if environ is None else environ

    debug = env.get("KEYMASTER_DEBUG", "").strip().lower() in _TRUTHY

    level_name = env.get("KEYMASTER_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else logging.WARNING
    if not isinstance(level, int):
        level = logging.WARNING
    if debug:
        level = logging.DEBUG

    return CliConfig(debug=debug, log_level=level)
