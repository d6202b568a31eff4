"""Declarative mapping from operation names to Coolify API calls.

Every operation resolves to exactly one :class:`Route`. Required fields listed
here are authoritative; the dispatcher checks them independently of the JSON
schemas advertised to hosts.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

_FORMATTER = string.Formatter()


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    required: Tuple[str, ...] = ()
    query: Tuple[str, ...] = ()
    query_defaults: Mapping[str, Any] = field(default_factory=dict)
    body: bool = False
    one_of: Tuple[str, ...] = ()
    feature: Optional[str] = None
    feature_label: Optional[str] = None
    unsupported: Optional[str] = None
    fallback: Optional[Mapping[str, Any]] = None

    @property
    def path_fields(self) -> Tuple[str, ...]:
        return tuple(name for _, name, _, _ in _FORMATTER.parse(self.path) if name)


def _get(path: str, *required: str, **options: Any) -> Route:
    return Route("GET", path, required=required, **options)


def _post(path: str, *required: str, body: bool = True) -> Route:
    return Route("POST", path, required=required, body=body)


def _patch(path: str, *required: str) -> Route:
    return Route("PATCH", path, required=required, body=True)


def _delete(path: str, *required: str) -> Route:
    return Route("DELETE", path, required=required)


def _unsupported(reason: str, *required: str) -> Route:
    return Route("GET", "", required=required, unsupported=reason)


def _lifecycle(collection: str, resource: str) -> Dict[str, Route]:
    return {
        f"start_{resource}": _get(f"/{collection}/{{uuid}}/start", "uuid"),
        f"stop_{resource}": _get(f"/{collection}/{{uuid}}/stop", "uuid"),
        f"restart_{resource}": _get(f"/{collection}/{{uuid}}/restart", "uuid"),
    }


def _crud(collection: str, resource: str, *create_required: str) -> Dict[str, Route]:
    return {
        f"list_{collection}": _get(f"/{collection}"),
        f"get_{resource}": _get(f"/{collection}/{{uuid}}", "uuid"),
        f"create_{resource}": _post(f"/{collection}", *create_required),
        f"update_{resource}": _patch(f"/{collection}/{{uuid}}", "uuid"),
        f"delete_{resource}": _delete(f"/{collection}/{{uuid}}", "uuid"),
    }


def _envs(collection: str, resource: str) -> Dict[str, Route]:
    return {
        f"get_{resource}_envs": _get(f"/{collection}/{{uuid}}/envs", "uuid"),
        f"create_{resource}_env": _post(f"/{collection}/{{uuid}}/envs", "uuid", "key"),
        f"update_{resource}_env": _patch(f"/{collection}/{{uuid}}/envs", "uuid", "key"),
        f"delete_{resource}_env": _delete(f"/{collection}/{{uuid}}/envs/{{env_uuid}}", "uuid", "env_uuid"),
        f"update_{resource}_envs_bulk": _patch(f"/{collection}/{{uuid}}/envs/bulk", "uuid", "data"),
    }


_APP_SOURCE = ("project_uuid", "environment_name", "server_uuid")
_GIT_SOURCE = (*_APP_SOURCE, "git_repository", "git_branch", "build_pack", "ports_exposes")

ROUTES: Mapping[str, Route] = {
    # Version & health
    "get_version": _get("/version"),
    "health_check": _get(
        "/health", fallback={"status": "Health check endpoint not available in this Coolify version"}
    ),
    # Teams
    "list_teams": _get("/teams"),
    "get_team": _get("/teams/{team_id}", "team_id"),
    "get_current_team": _get("/teams/current"),
    "get_current_team_members": _get("/teams/current/members"),
    "get_team_members": _get("/teams/{team_id}/members", "team_id"),
    # Servers
    **_crud("servers", "server", "name", "ip", "private_key_uuid"),
    "validate_server": _get("/servers/{uuid}/validate", "uuid"),
    "get_server_resources": _get("/servers/{uuid}/resources", "uuid"),
    "get_server_domains": _get("/servers/{uuid}/domains", "uuid"),
    # Projects & environments
    **_crud("projects", "project", "name"),
    "list_environments": _get("/projects/{project_uuid}/environments", "project_uuid"),
    "get_environment": _get(
        "/projects/{project_uuid}/{environment_name_or_uuid}", "project_uuid", "environment_name_or_uuid"
    ),
    "create_environment": _post("/projects/{project_uuid}/environments", "project_uuid", "name"),
    "delete_environment": _delete(
        "/projects/{project_uuid}/environments/{environment_name_or_uuid}",
        "project_uuid",
        "environment_name_or_uuid",
    ),
    # Applications
    **_crud("applications", "application", "project_uuid", "environment_name", "destination_uuid"),
    "create_public_application": _post("/applications/public", *_GIT_SOURCE),
    "create_private_github_app_application": _post(
        "/applications/private-github-app", *_GIT_SOURCE, "github_app_uuid"
    ),
    "create_private_deploy_key_application": _post(
        "/applications/private-deploy-key", *_GIT_SOURCE, "private_key_uuid"
    ),
    "create_dockerfile_application": _post("/applications/dockerfile", *_APP_SOURCE, "dockerfile", "ports_exposes"),
    "create_dockerimage_application": _post(
        "/applications/dockerimage", *_APP_SOURCE, "docker_registry_image_name", "ports_exposes"
    ),
    "create_dockercompose_application": _post("/applications/dockercompose", *_APP_SOURCE, "docker_compose_raw"),
    **_lifecycle("applications", "application"),
    "deploy_application": _get("/deploy", "uuid", query=("uuid", "tag", "force")),
    "deploy": _get("/deploy", query=("uuid", "tag", "force"), one_of=("uuid", "tag")),
    "execute_command": _unsupported(
        "Executing commands inside application containers is not exposed by Coolify", "uuid", "command"
    ),
    "get_application_logs": _get(
        "/applications/{uuid}/logs",
        "uuid",
        query=("lines",),
        query_defaults={"lines": 100},
        feature="application_logs",
        feature_label="Application logs",
    ),
    **_envs("applications", "application"),
    "get_application_deployments": _get("/deployments/applications/{uuid}", "uuid"),
    # Services
    **_crud("services", "service", "type", "name", "project_uuid", "environment_name", "server_uuid"),
    **_lifecycle("services", "service"),
    "get_service_logs": _unsupported("Service logs are not exposed by Coolify", "uuid"),
    **_envs("services", "service"),
    # Databases
    **_crud("databases", "database", "name", "type", "project_uuid", "environment_name", "server_uuid"),
    **_lifecycle("databases", "database"),
    "get_database_backups": _get("/databases/{uuid}/backups", "uuid"),
    "create_database_backup": _post("/databases/{uuid}/backups", "uuid"),
    "get_database_logs": _unsupported("Database logs are not exposed by Coolify", "uuid"),
    # Deployments
    "list_deployments": _get("/deployments"),
    "get_deployment": _get("/deployments/{uuid}", "uuid"),
    "cancel_deployment": _post("/deployments/{uuid}/cancel", "uuid", body=False),
    # Private keys
    "list_private_keys": _get("/security/keys"),
    "get_private_key": _get("/security/keys/{uuid}", "uuid"),
    "create_private_key": _post("/security/keys", "name", "private_key"),
    "update_private_key": _patch("/security/keys/{uuid}", "uuid"),
    "delete_private_key": _delete("/security/keys/{uuid}", "uuid"),
    # GitHub Apps
    "list_github_apps": _get("/github-apps"),
    "create_github_app": _post("/github-apps", "name"),
    "get_github_app": _get("/github-apps/{github_app_id}", "github_app_id"),
    "update_github_app": _patch("/github-apps/{github_app_id}", "github_app_id"),
    "delete_github_app": _delete("/github-apps/{github_app_id}", "github_app_id"),
    "get_github_app_repositories": _get("/github-apps/{github_app_id}/repositories", "github_app_id"),
    "get_github_app_repository_branches": _get(
        "/github-apps/{github_app_id}/repositories/{owner}/{repo}/branches", "github_app_id", "owner", "repo"
    ),
    # Resources
    "list_resources": _get("/resources"),
}
