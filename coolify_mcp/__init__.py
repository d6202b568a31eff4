"""MCP bridge exposing the Coolify platform API as assistant tools."""

from __future__ import annotations

import logging
import os

_LOGGER = logging.getLogger("coolify_mcp")
if not _LOGGER.handlers:
    # Use environment LOG_LEVEL if present, default to INFO. Output goes to
    # stderr so the stdio transport stays clean.
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    _LOGGER.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    handler.setFormatter(formatter)
    _LOGGER.addHandler(handler)

__version__ = "1.0.0"
