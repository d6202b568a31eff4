"""Helpers for composing the dispatcher used by the application entry points."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx

from coolify_mcp.client import CoolifyClient
from coolify_mcp.config import Settings, load_settings
from coolify_mcp.tools.dispatcher import Dispatcher
from coolify_mcp.version import VersionGate

_LOGGER = logging.getLogger("coolify_mcp.runtime")


def build_dispatcher(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
    probe_version: bool = True,
) -> Dispatcher:
    """Construct a :class:`Dispatcher` wired to a live :class:`CoolifyClient`.

    Parameters
    ----------
    settings:
        Resolved configuration. When omitted it is read from the environment.
    transport:
        Optional httpx transport, used by tests to stand in for Coolify.
    probe_version:
        Query ``/version`` once up front so feature checks reflect the
        connected instance.
    """

    settings = settings or load_settings()
    client = CoolifyClient(settings.coolify, transport=transport)
    gate = VersionGate(client)
    if probe_version:
        version = gate.probe()
        mode = "READ-ONLY" if settings.mode.read_only else "FULL ACCESS"
        _LOGGER.info("Connected to Coolify %s [%s]", version.raw, mode)
        if settings.mode.read_only:
            _LOGGER.info("Read-only mode enabled: write operations are disabled")
    return Dispatcher(client, settings.mode, version_gate=gate)


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    return build_dispatcher()


def clear_cached_dispatcher() -> None:
    """Drop the cached dispatcher (used in tests)."""

    get_dispatcher.cache_clear()


def describe_operations() -> List[Dict[str, Any]]:
    """Return the operations visible in the current mode, as MCP tool dicts."""

    return [definition.as_tool() for definition in get_dispatcher().visible_operations()]


def execute_operation(name: str, arguments: Any) -> Any:
    """Run a single operation without going through an MCP session.

    Used by the synchronous HTTP endpoints.
    """

    return get_dispatcher().dispatch(name, arguments)
