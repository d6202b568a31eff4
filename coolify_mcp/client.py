"""HTTP transport for the Coolify v1 REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from coolify_mcp.config import CoolifyConfig

_LOGGER = logging.getLogger("coolify_mcp.client")

API_PREFIX = "/api/v1"


class CoolifyAPIError(RuntimeError):
    """Raised for non-2xx responses and network failures."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(CoolifyAPIError):
    """Raised when Coolify answers with HTTP 429."""

    def __init__(self, retry_after: Optional[str] = None):
        if retry_after:
            message = f"Coolify API rate limit: Rate limit exceeded. Retry after {retry_after}s."
        else:
            message = "Coolify API rate limit: Rate limit exceeded. Please wait."
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


def build_base_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{API_PREFIX}"


def _raise_on_rate_limit(response: httpx.Response) -> None:
    if response.status_code == 429:
        raise RateLimitError(response.headers.get("retry-after"))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    text = response.text.strip()
    return text or response.reason_phrase


class CoolifyClient:
    """Synchronous client for the Coolify API.

    The target address is composed once: trailing slashes are stripped and the
    ``/api/v1`` segment appended. Every request carries the bearer token and,
    when configured, the ``X-Team-Id`` scope header.
    """

    def __init__(self, config: CoolifyConfig, *, transport: Optional[httpx.BaseTransport] = None):
        headers = {
            "Authorization": f"Bearer {config.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if config.team_id:
            headers["X-Team-Id"] = config.team_id

        self.base_url = build_base_url(config.base_url)
        self._http = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=config.timeout,
            event_hooks={"response": [_raise_on_rate_limit]},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CoolifyClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def create(self, path: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("POST", path, json=payload)

    def update(self, path: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("PATCH", path, json=payload)

    def remove(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        kwargs: Dict[str, Any] = {}
        if params:
            kwargs["params"] = dict(params)
        if json is not None:
            kwargs["json"] = dict(json)

        _LOGGER.debug("%s %s%s", method, self.base_url, path)
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise CoolifyAPIError(
                f"Coolify API error {status}: {_error_message(exc.response)}",
                status_code=status,
            ) from exc
        except httpx.RequestError as exc:
            raise CoolifyAPIError(f"Coolify API request failed: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
