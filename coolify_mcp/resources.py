"""Read-only MCP resources mapping fixed URIs to collection listings."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

RESOURCE_ENDPOINTS: Mapping[str, str] = {
    "coolify://applications": "/applications",
    "coolify://databases": "/databases",
    "coolify://servers": "/servers",
    "coolify://projects": "/projects",
    "coolify://services": "/services",
    "coolify://teams": "/teams",
    "coolify://deployments": "/deployments",
    "coolify://private-keys": "/security/keys",
}

_RESOURCE_TITLES: Mapping[str, str] = {
    "coolify://applications": "Applications",
    "coolify://databases": "Databases",
    "coolify://servers": "Servers",
    "coolify://projects": "Projects",
    "coolify://services": "Services",
    "coolify://teams": "Teams",
    "coolify://deployments": "Deployments",
    "coolify://private-keys": "Private Keys",
}


def resource_definitions() -> List[Dict[str, str]]:
    definitions = []
    for uri, title in _RESOURCE_TITLES.items():
        noun = "SSH private keys" if uri.endswith("private-keys") else title.lower()
        definitions.append(
            {
                "uri": uri,
                "name": f"Coolify {title}",
                "description": f"List all {noun} in Coolify",
                "mimeType": "application/json",
            }
        )
    return definitions


def read_resource(client: Any, uri: str) -> Any:
    """Fetch the collection behind ``uri``; unknown URIs raise ``ValueError``."""

    endpoint = RESOURCE_ENDPOINTS.get(uri.rstrip("/"))
    if endpoint is None:
        raise ValueError(f"Unknown resource: {uri}")
    return client.fetch(endpoint)
