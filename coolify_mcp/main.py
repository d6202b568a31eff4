"""FastAPI application exposing the Coolify operation dispatcher over HTTP."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from coolify_mcp.client import CoolifyAPIError, RateLimitError
from coolify_mcp.config import MissingConfigurationError
from coolify_mcp.runtime import describe_operations, execute_operation
from coolify_mcp.tools.errors import InvalidArgumentsError, PermissionDeniedError, UnknownOperationError

app = FastAPI(title="Coolify MCP Bridge")

api_router = APIRouter(prefix="/api", tags=["api"])


@api_router.get("/health")
def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok"}


class OperationRequest(BaseModel):
    """Arguments for a single Coolify operation."""

    arguments: Dict[str, Any] = Field(default_factory=dict, description="Arguments for the operation")


@api_router.get("/operations")
def list_operations() -> JSONResponse:
    """Return the operations visible in the current mode."""

    try:
        operations = describe_operations()
    except MissingConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return JSONResponse({"operations": operations})


@api_router.post("/operations/{name}")
def run_operation(name: str, request: OperationRequest) -> JSONResponse:
    """Execute one operation through the shared dispatcher."""

    try:
        result = execute_operation(name, request.arguments)
    except UnknownOperationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InvalidArgumentsError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail={"message": str(exc), "field": exc.field}
        ) from exc
    except MissingConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RateLimitError as exc:
        headers = {"Retry-After": exc.retry_after} if exc.retry_after else None
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc), headers=headers
        ) from exc
    except CoolifyAPIError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail={"message": str(exc), "status_code": exc.status_code}
        ) from exc

    if isinstance(result, dict) and result.get("confirmation_required"):
        return JSONResponse({"status": "confirmation_required", "operation": name, "result": result})

    return JSONResponse({"status": "success", "operation": name, "result": result})


app.include_router(api_router)


__all__ = ["app"]
