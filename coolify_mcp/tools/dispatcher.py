"""Dispatch of named operations to Coolify API calls.

:class:`Dispatcher` is the single entry point shared by the MCP server and the
HTTP bridge. A request is checked against the mode filter, then the danger
gate, then the route's required fields, and finally executed as exactly one
call on :class:`~coolify_mcp.client.CoolifyClient`. Operations the remote API
cannot serve, or that the connected version does not support yet, resolve to
an ``{"error": ...}`` payload without touching the network.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, MutableMapping, Optional
from urllib.parse import quote

from coolify_mcp.client import CoolifyAPIError, CoolifyClient, RateLimitError
from coolify_mcp.config import ModeConfig
from coolify_mcp.tools.definitions import REGISTRY, OperationDefinition, OperationRegistry
from coolify_mcp.tools.errors import InvalidArgumentsError, UnknownOperationError
from coolify_mcp.tools.policy import DangerGate, ModeFilter
from coolify_mcp.tools.routes import ROUTES, Route
from coolify_mcp.version import VersionGate

_LOGGER = logging.getLogger("coolify_mcp.dispatcher")

_SENSITIVE_KEYS = {"key", "secret", "token", "password", "credential", "value"}


class Dispatcher:
    """Resolve and execute one operation request at a time."""

    def __init__(
        self,
        client: CoolifyClient,
        mode: ModeConfig,
        *,
        version_gate: Optional[VersionGate] = None,
        registry: OperationRegistry = REGISTRY,
        routes: Mapping[str, Route] = ROUTES,
    ):
        self.client = client
        self.mode = mode
        self.registry = registry
        self.routes = routes
        self.version_gate = version_gate if version_gate is not None else VersionGate(client)
        self.mode_filter = ModeFilter(registry, mode)
        self.danger_gate = DangerGate(mode)

    def visible_operations(self) -> List[OperationDefinition]:
        return self.mode_filter.visible_operations()

    def dispatch(self, name: str, arguments: Any = None) -> Any:
        if name not in self.registry or name not in self.routes:
            raise UnknownOperationError(f"Unknown tool: {name}")

        args = _coerce_arguments(arguments)

        # Read-only visibility applies regardless of confirm.
        self.mode_filter.check_visible(name)

        decision = self.danger_gate.require_confirmation(name, args)
        if not decision.proceed:
            _LOGGER.info("Operation %s withheld pending confirmation", name)
            return decision.payload

        args.pop("confirm", None)
        route = self.routes[name]
        _check_required(name, route, args)

        if route.unsupported:
            _LOGGER.info("Operation %s is not supported by the Coolify API", name)
            return {"error": f"{route.unsupported}, not available via this API"}

        if route.feature and not self.version_gate.is_feature_available(route.feature):
            threshold = self.version_gate.required_beta(route.feature)
            label = route.feature_label or route.feature
            _LOGGER.info("Operation %s requires beta.%s+", name, threshold)
            return {"error": f"{label} not available in this Coolify version (requires beta.{threshold}+)"}

        _LOGGER.info("Dispatching operation=%s params=%s", name, _sanitize(args))
        try:
            return self._execute(route, args)
        except RateLimitError as exc:
            _LOGGER.warning("Operation %s rate limited: %s", name, exc)
            raise
        except CoolifyAPIError as exc:
            if route.fallback is not None:
                _LOGGER.warning("Operation %s unavailable (%s); returning fallback", name, exc)
                return dict(route.fallback)
            _LOGGER.error("Operation %s failed: %s", name, exc)
            raise

    def _execute(self, route: Route, args: MutableMapping[str, Any]) -> Any:
        path = _build_path(route, args)
        remaining = {key: value for key, value in args.items() if key not in route.path_fields}

        if route.method == "GET":
            return self.client.fetch(path, _build_query(route, remaining) or None)
        if route.method == "POST":
            return self.client.create(path, remaining if route.body else None)
        if route.method == "PATCH":
            return self.client.update(path, remaining)
        if route.method == "DELETE":
            return self.client.remove(path)
        raise ValueError(f"Unsupported HTTP method '{route.method}'")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_required(name: str, route: Route, args: Mapping[str, Any]) -> None:
    for field_name in route.required:
        if _is_missing(args.get(field_name)):
            raise InvalidArgumentsError(f"{field_name} is required", field=field_name)
    if route.one_of and all(_is_missing(args.get(field_name)) for field_name in route.one_of):
        fields = " or ".join(route.one_of)
        raise InvalidArgumentsError(f"{fields} is required for {name}", field=route.one_of[0])


def _build_path(route: Route, args: Mapping[str, Any]) -> str:
    values = {field_name: quote(str(args[field_name]), safe="") for field_name in route.path_fields}
    return route.path.format(**values)


def _build_query(route: Route, args: Mapping[str, Any]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    for key in route.query:
        value = args.get(key, route.query_defaults.get(key))
        if value is None or value is False:
            continue
        query[key] = "true" if value is True else value
    return query


def _coerce_arguments(raw: Any) -> MutableMapping[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return {}
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentsError("Arguments must be a JSON object") from exc
        if not isinstance(parsed, Mapping):
            raise InvalidArgumentsError("Arguments JSON must decode to an object")
        return dict(parsed)
    raise InvalidArgumentsError("Arguments must be mapping-compatible")


def _sanitize(params: Mapping[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    for key, value in params.items():
        lower_key = key.lower()
        masked = any(token in lower_key for token in _SENSITIVE_KEYS)
        if masked:
            sanitized[key] = "***"
        else:
            sanitized[key] = value
    return sanitized
