"""Mode filtering and confirmation gating for operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from coolify_mcp.config import ModeConfig
from coolify_mcp.tools.definitions import (
    READ_ONLY_OPERATIONS,
    OperationDefinition,
    OperationRegistry,
    get_danger_warning,
    is_dangerous_operation,
)
from coolify_mcp.tools.errors import PermissionDeniedError


class ModeFilter:
    """Partitions the registry into the read-only or full-access view."""

    def __init__(self, registry: OperationRegistry, mode: ModeConfig):
        self._registry = registry
        self._mode = mode

    def is_read_only(self) -> bool:
        return self._mode.read_only

    def is_visible(self, name: str) -> bool:
        return not self._mode.read_only or name in READ_ONLY_OPERATIONS

    def visible_operations(self) -> List[OperationDefinition]:
        return [definition for definition in self._registry.list_all() if self.is_visible(definition.name)]

    def check_visible(self, name: str) -> None:
        if not self.is_visible(name):
            raise PermissionDeniedError(
                f"Operation '{name}' is not allowed in read-only mode. "
                "Set COOLIFY_READONLY=false to enable write operations."
            )


@dataclass(frozen=True)
class Decision:
    proceed: bool
    payload: Optional[Dict[str, Any]] = None


PROCEED = Decision(proceed=True)


def _confirmed(arguments: Mapping[str, Any]) -> bool:
    return arguments.get("confirm") is True


class DangerGate:
    """Withholds dangerous operations until the caller passes ``confirm: true``.

    The decision depends only on the mode flags, the operation name and the
    arguments, so a blocked request can be retried as-is with the flag added.
    """

    def __init__(self, mode: ModeConfig):
        self._mode = mode

    def is_dangerous(self, name: str) -> bool:
        return is_dangerous_operation(name)

    def require_confirmation(self, name: str, arguments: Mapping[str, Any]) -> Decision:
        if not self._mode.require_confirm or not self.is_dangerous(name):
            return PROCEED
        if _confirmed(arguments):
            return PROCEED

        warning = get_danger_warning(name)
        return Decision(
            proceed=False,
            payload={
                "confirmation_required": True,
                "action": name,
                "warning": warning,
                "message": f"{warning} To proceed, call '{name}' again with confirm: true.",
                "example": {**dict(arguments), "confirm": True},
            },
        )
