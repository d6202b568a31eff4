"""Coolify version detection and feature availability checks."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from coolify_mcp.client import CoolifyAPIError

_LOGGER = logging.getLogger("coolify_mcp.version")

_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:-beta\.(\d+))?")


@dataclass(frozen=True)
class VersionDescriptor:
    raw: str
    major: int
    minor: int
    patch: int
    beta: Optional[int] = None

    @property
    def is_stable(self) -> bool:
        return self.beta is None


# Known-good release used whenever the remote version cannot be determined.
FALLBACK_VERSION = VersionDescriptor(raw="4.0.0-beta.420", major=4, minor=0, patch=0, beta=420)

# Minimum beta build per feature. Stable releases satisfy every threshold.
FEATURE_MIN_BETA: Mapping[str, int] = {
    "execute_command": 400,
    "application_logs": 380,
}


def parse_version(value: Any) -> VersionDescriptor:
    """Parse ``major.minor.patch[-beta.N]``; anything else yields the fallback."""

    if not isinstance(value, str):
        return FALLBACK_VERSION
    match = _VERSION_PATTERN.match(value.strip())
    if not match:
        return FALLBACK_VERSION
    major, minor, patch, beta = match.groups()
    return VersionDescriptor(
        raw=value.strip(),
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        beta=int(beta) if beta is not None else None,
    )


def _extract_version_string(body: Any) -> Any:
    # /version answers with a bare string on most releases; older builds wrap it.
    if isinstance(body, Mapping):
        return body.get("version") or body.get("coolify")
    return body


class VersionGate:
    """Holds the probed :class:`VersionDescriptor` and answers feature queries.

    Checks fail open: before the first probe, and for feature keys without a
    known threshold, every feature is reported as available.
    """

    def __init__(self, client: Any):
        self._client = client
        self._version: Optional[VersionDescriptor] = None

    @property
    def version(self) -> Optional[VersionDescriptor]:
        return self._version

    def probe(self) -> VersionDescriptor:
        try:
            body = self._client.fetch("/version")
        except CoolifyAPIError as exc:
            _LOGGER.warning(
                "Coolify version probe failed (%s); assuming %s", exc, FALLBACK_VERSION.raw
            )
            descriptor = FALLBACK_VERSION
        else:
            descriptor = parse_version(_extract_version_string(body))
            if descriptor is FALLBACK_VERSION:
                _LOGGER.warning(
                    "Unrecognised Coolify version %r; assuming %s", body, FALLBACK_VERSION.raw
                )
        self._version = descriptor
        return descriptor

    def is_feature_available(self, feature: str) -> bool:
        if self._version is None:
            return True
        threshold = FEATURE_MIN_BETA.get(feature)
        if threshold is None or self._version.is_stable:
            return True
        return self._version.beta >= threshold

    def required_beta(self, feature: str) -> Optional[int]:
        return FEATURE_MIN_BETA.get(feature)
