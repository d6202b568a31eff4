"""Process configuration resolved once from the hosting environment."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT_SECONDS = 30.0


class MissingConfigurationError(RuntimeError):
    """Raised when the Coolify address or API token is not configured."""


class CoolifyConfig(BaseModel):
    """Connection settings for the remote Coolify instance."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    token: str
    team_id: Optional[str] = None
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)


class ModeConfig(BaseModel):
    """Process-wide policy flags. Immutable for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    read_only: bool = False
    require_confirm: bool = False


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    coolify: CoolifyConfig
    mode: ModeConfig


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "false").strip().lower() == "true"


def _first(environ: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value.strip()
    return None


def load_mode_config(environ: Optional[Mapping[str, str]] = None) -> ModeConfig:
    """Read the read-only and confirmation flags from the environment."""

    env = os.environ if environ is None else environ
    return ModeConfig(
        read_only=_flag(env, "COOLIFY_READONLY"),
        require_confirm=_flag(env, "COOLIFY_REQUIRE_CONFIRM"),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from environment variables.

    ``COOLIFY_BASE_URL`` (or ``COOLIFY_API_URL``) and ``COOLIFY_TOKEN`` (or
    ``COOLIFY_API_TOKEN``) are required. ``COOLIFY_TEAM_ID`` and
    ``COOLIFY_TIMEOUT`` are optional.
    """

    env = os.environ if environ is None else environ

    base_url = _first(env, "COOLIFY_BASE_URL", "COOLIFY_API_URL")
    token = _first(env, "COOLIFY_TOKEN", "COOLIFY_API_TOKEN")
    if not base_url or not token:
        raise MissingConfigurationError(
            "COOLIFY_BASE_URL and COOLIFY_TOKEN environment variables are required. "
            "Example: COOLIFY_BASE_URL=https://your-coolify.com COOLIFY_TOKEN=your-token coolify-mcp"
        )

    raw_timeout = _first(env, "COOLIFY_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise MissingConfigurationError(f"COOLIFY_TIMEOUT must be a number, got {raw_timeout!r}") from exc

    return Settings(
        coolify=CoolifyConfig(
            base_url=base_url,
            token=token,
            team_id=_first(env, "COOLIFY_TEAM_ID"),
            timeout=timeout,
        ),
        mode=load_mode_config(env),
    )
