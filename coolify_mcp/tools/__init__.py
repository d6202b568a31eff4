"""Operation registry, policy gates and dispatch for Coolify tools."""

from .definitions import DANGEROUS_OPERATIONS, READ_ONLY_OPERATIONS, REGISTRY, OperationDefinition
from .dispatcher import Dispatcher
from .errors import DispatchError, InvalidArgumentsError, PermissionDeniedError, UnknownOperationError

__all__ = [
    "DANGEROUS_OPERATIONS",
    "READ_ONLY_OPERATIONS",
    "REGISTRY",
    "OperationDefinition",
    "Dispatcher",
    "DispatchError",
    "InvalidArgumentsError",
    "PermissionDeniedError",
    "UnknownOperationError",
]
