"""Errors raised while resolving an operation request."""

from __future__ import annotations

from typing import Optional

from mcp.types import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND


class DispatchError(Exception):
    """Base class for request errors surfaced verbatim to the caller."""

    code: int = INVALID_REQUEST


class PermissionDeniedError(DispatchError):
    """Raised when an operation is hidden by the current mode."""

    code = INVALID_REQUEST


class InvalidArgumentsError(DispatchError):
    """Raised when a required argument is missing or malformed."""

    code = INVALID_PARAMS

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownOperationError(DispatchError):
    """Raised for operation names missing from the registry."""

    code = METHOD_NOT_FOUND
