"""Operation catalog exposed to MCP hosts.

Each entry pairs an operation name with a human description and a JSON Schema
describing its arguments. The schemas are advisory metadata for the host; the
dispatcher enforces required fields on its own from the route table.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

# Operations that only fetch data.
READ_ONLY_OPERATIONS: frozenset[str] = frozenset(
    {
        "get_version",
        "health_check",
        "list_teams",
        "get_team",
        "get_current_team",
        "get_current_team_members",
        "get_team_members",
        "list_servers",
        "get_server",
        "get_server_resources",
        "get_server_domains",
        "list_projects",
        "get_project",
        "list_environments",
        "get_environment",
        "list_applications",
        "get_application",
        "get_application_logs",
        "get_application_envs",
        "get_application_deployments",
        "list_services",
        "get_service",
        "get_service_envs",
        "get_service_logs",
        "list_databases",
        "get_database",
        "get_database_backups",
        "get_database_logs",
        "list_deployments",
        "get_deployment",
        "list_private_keys",
        "get_private_key",
        "list_resources",
        "list_github_apps",
        "get_github_app",
        "get_github_app_repositories",
        "get_github_app_repository_branches",
    }
)

# Operations that need ``confirm: true`` when COOLIFY_REQUIRE_CONFIRM=true.
DANGER_WARNINGS: Mapping[str, str] = {
    "stop_application": "This will stop the application and make it unavailable until restarted.",
    "restart_application": "This will restart the application, causing brief downtime.",
    "stop_service": "This will stop the service and make it unavailable until restarted.",
    "restart_service": "This will restart the service, causing brief downtime.",
    "stop_database": "This will stop the database and make it unavailable until restarted.",
    "restart_database": "This will restart the database, causing brief downtime.",
    "deploy_application": "This will deploy a new version of the application, which may cause downtime.",
    "deploy": "This will deploy resources by UUID or tag, which may cause downtime.",
    "execute_command": "This will execute a command inside the application container.",
    "delete_server": "This will permanently delete the server and all its resources.",
    "delete_project": "This will permanently delete the project and all its resources.",
    "delete_environment": "This will permanently delete the environment and all its resources.",
    "delete_application": "This will permanently delete the application and all its data.",
    "delete_service": "This will permanently delete the service and all its data.",
    "delete_database": "This will permanently delete the database and all its data.",
    "delete_private_key": "This will permanently delete the private key. Make sure no servers are using it.",
    "delete_github_app": (
        "This will permanently delete the GitHub App configuration. Applications using it will lose access."
    ),
    "cancel_deployment": "This will cancel the deployment in progress.",
}

DANGEROUS_OPERATIONS: frozenset[str] = frozenset(DANGER_WARNINGS)

DEFAULT_DANGER_WARNING = "This is a potentially dangerous operation."


@dataclass(frozen=True)
class OperationDefinition:
    """One named operation with its advisory input contract."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def as_tool(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(dict(self.input_schema)),
        }


class OperationRegistry:
    """Ordered, immutable collection of :class:`OperationDefinition` objects."""

    def __init__(self, definitions: Iterable[OperationDefinition]):
        ordered: List[OperationDefinition] = []
        index: Dict[str, OperationDefinition] = {}
        for definition in definitions:
            if definition.name in index:
                raise ValueError(f"Duplicate operation name '{definition.name}'")
            ordered.append(definition)
            index[definition.name] = definition
        self._ordered: Tuple[OperationDefinition, ...] = tuple(ordered)
        self._index = index

    def list_all(self) -> Tuple[OperationDefinition, ...]:
        return self._ordered

    def get(self, name: str) -> Optional[OperationDefinition]:
        return self._index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[OperationDefinition]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


# Schema helpers -------------------------------------------------------------


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _number(description: str, default: Optional[int] = None) -> Dict[str, Any]:
    prop: Dict[str, Any] = {"type": "number", "description": description}
    if default is not None:
        prop["default"] = default
    return prop


def _boolean(description: str, default: Optional[bool] = None) -> Dict[str, Any]:
    prop: Dict[str, Any] = {"type": "boolean", "description": description}
    if default is not None:
        prop["default"] = default
    return prop


_CONFIRM = _boolean("Confirm the dangerous operation (required when COOLIFY_REQUIRE_CONFIRM=true)")


def _schema(properties: Optional[Mapping[str, Any]] = None, required: Sequence[str] = ()) -> Dict[str, Any]:
    return {"type": "object", "properties": dict(properties or {}), "required": list(required)}


def _op(name: str, description: str, properties: Optional[Mapping[str, Any]] = None, required: Sequence[str] = ()):
    props = dict(properties or {})
    if name in DANGEROUS_OPERATIONS:
        props["confirm"] = _CONFIRM
        description = f"{description}. When COOLIFY_REQUIRE_CONFIRM=true, requires confirm: true parameter."
    return OperationDefinition(name=name, description=description, input_schema=_schema(props, required))


def _uuid_op(name: str, description: str, label: str) -> OperationDefinition:
    return _op(name, description, {"uuid": _string(f"{label} UUID")}, ["uuid"])


def _logs_op(name: str, description: str, label: str) -> OperationDefinition:
    return _op(
        name,
        description,
        {
            "uuid": _string(f"{label} UUID"),
            "lines": _number("Number of lines (default: 100)", default=100),
        },
        ["uuid"],
    )


def _application_source_op(name: str, description: str, extra: Mapping[str, Any], extra_required: Sequence[str]):
    properties: Dict[str, Any] = {
        "project_uuid": _string("Project UUID"),
        "environment_name": _string("Environment name"),
        "environment_uuid": _string("Environment UUID (optional)"),
        "server_uuid": _string("Server UUID"),
        "destination_uuid": _string("Destination UUID (optional if server has single destination)"),
    }
    properties.update(extra)
    properties.update(
        {
            "name": _string("Application name (optional, auto-generated if not provided)"),
            "description": _string("Application description"),
            "instant_deploy": _boolean("Deploy immediately after creation", default=False),
        }
    )
    required = ["project_uuid", "environment_name", "server_uuid", *extra_required]
    return _op(name, description, properties, required)


_GIT_SOURCE = {
    "git_branch": _string("Git branch name"),
    "build_pack": _string("Build pack type (nixpacks, dockerfile, dockercompose)"),
    "ports_exposes": _string('Ports to expose (e.g., "3000,8080")'),
}
_GIT_REQUIRED = ["git_repository", "git_branch", "build_pack", "ports_exposes"]


def _env_var_properties(label: str, *, with_defaults: bool) -> Dict[str, Any]:
    default = False if with_defaults else None
    return {
        "uuid": _string(f"{label} UUID"),
        "key": _string("Environment variable key"),
        "value": _string("Environment variable value"),
        "is_preview": _boolean("Use in preview deployments", default=default),
        "is_literal": _boolean("Is literal value", default=default),
        "is_multiline": _boolean("Is multiline value", default=default),
    }


def _bulk_envs_op(name: str, description: str, label: str) -> OperationDefinition:
    item = _schema(
        {
            "key": _string("Environment variable key"),
            "value": _string("Environment variable value"),
            "is_preview": _boolean("Use in preview deployments"),
            "is_literal": _boolean("Is literal value"),
            "is_multiline": _boolean("Is multiline value"),
        },
        ["key", "value"],
    )
    return _op(
        name,
        description,
        {
            "uuid": _string(f"{label} UUID"),
            "data": {"type": "array", "description": "Array of environment variables to update", "items": item},
        },
        ["uuid", "data"],
    )


def _env_ops(resource: str, label: str) -> List[OperationDefinition]:
    return [
        _uuid_op(f"get_{resource}_envs", f"Get environment variables for a {resource}", label),
        _op(
            f"create_{resource}_env",
            f"Create an environment variable for a {resource}",
            _env_var_properties(label, with_defaults=True),
            ["uuid", "key"],
        ),
        _op(
            f"update_{resource}_env",
            f"Update an environment variable for a {resource}",
            _env_var_properties(label, with_defaults=False),
            ["uuid", "key"],
        ),
        _op(
            f"delete_{resource}_env",
            f"Delete an environment variable from a {resource}",
            {"uuid": _string(f"{label} UUID"), "env_uuid": _string("Environment variable UUID")},
            ["uuid", "env_uuid"],
        ),
        _bulk_envs_op(
            f"update_{resource}_envs_bulk", f"Update multiple environment variables for a {resource} in bulk", label
        ),
    ]


_GITHUB_APP_ID = {"github_app_id": _string("GitHub App ID")}

_OPERATIONS: List[OperationDefinition] = [
    # Version & health
    _op("get_version", "Get Coolify version information"),
    _op("health_check", "Check Coolify API health status"),
    # Teams
    _op("list_teams", "List all teams accessible to the authenticated user"),
    _op("get_team", "Get details of a specific team", {"team_id": _string("Team ID")}, ["team_id"]),
    _op("get_current_team", "Get details of the current team"),
    _op("get_current_team_members", "Get members of the current team"),
    _op("get_team_members", "Get members of a specific team", {"team_id": _string("Team ID")}, ["team_id"]),
    # Servers
    _op("list_servers", "List all servers in Coolify"),
    _uuid_op("get_server", "Get server details by UUID", "Server"),
    _op(
        "create_server",
        "Create a new server",
        {
            "name": _string("Server name"),
            "description": _string("Server description"),
            "ip": _string("Server IP address"),
            "port": _number("SSH port (default: 22)", default=22),
            "user": _string("SSH user (default: root)") | {"default": "root"},
            "private_key_uuid": _string("UUID of the private key for SSH"),
            "is_build_server": _boolean("Use as build server", default=False),
            "instant_validate": _boolean("Validate immediately", default=True),
        },
        ["name", "ip", "private_key_uuid"],
    ),
    _op(
        "update_server",
        "Update a server",
        {
            "uuid": _string("Server UUID"),
            "name": _string("Server name"),
            "description": _string("Server description"),
            "ip": _string("Server IP address"),
            "port": _number("SSH port"),
            "user": _string("SSH user"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_server", "Delete a server", "Server"),
    _uuid_op("validate_server", "Validate server connection", "Server"),
    _uuid_op("get_server_resources", "Get server resource usage", "Server"),
    _uuid_op("get_server_domains", "Get domains configured on a server", "Server"),
    # Projects
    _op("list_projects", "List all projects"),
    _uuid_op("get_project", "Get project details", "Project"),
    _op(
        "create_project",
        "Create a new project",
        {"name": _string("Project name"), "description": _string("Project description")},
        ["name"],
    ),
    _op(
        "update_project",
        "Update a project",
        {
            "uuid": _string("Project UUID"),
            "name": _string("Project name"),
            "description": _string("Project description"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_project", "Delete a project", "Project"),
    # Environments
    _op(
        "list_environments",
        "List environments in a project",
        {"project_uuid": _string("Project UUID")},
        ["project_uuid"],
    ),
    _op(
        "get_environment",
        "Get environment details",
        {
            "project_uuid": _string("Project UUID"),
            "environment_name_or_uuid": _string("Environment name or UUID"),
        },
        ["project_uuid", "environment_name_or_uuid"],
    ),
    _op(
        "create_environment",
        "Create a new environment in a project",
        {
            "project_uuid": _string("Project UUID"),
            "name": _string("Environment name (e.g., production, staging)"),
        },
        ["project_uuid", "name"],
    ),
    _op(
        "delete_environment",
        "Delete an environment",
        {
            "project_uuid": _string("Project UUID"),
            "environment_name_or_uuid": _string("Environment name or UUID"),
        },
        ["project_uuid", "environment_name_or_uuid"],
    ),
    # Applications
    _op("list_applications", "List all applications"),
    _uuid_op("get_application", "Get application details", "Application"),
    _op(
        "create_application",
        "Create a new application",
        {
            "project_uuid": _string("Project UUID"),
            "environment_name": _string("Environment name"),
            "environment_uuid": _string("Environment UUID (optional)"),
            "git_repository": _string("Git repository URL"),
            "ports_exposes": _string('Ports to expose (e.g., "3000,8080")'),
            "destination_uuid": _string("Destination server UUID"),
        },
        ["project_uuid", "environment_name", "destination_uuid"],
    ),
    _application_source_op(
        "create_public_application",
        "Create a new public application from a public Git repository",
        {"git_repository": _string("Public Git repository URL"), **_GIT_SOURCE},
        _GIT_REQUIRED,
    ),
    _application_source_op(
        "create_private_github_app_application",
        "Create a new application from a private Git repository using GitHub App authentication",
        {
            "git_repository": _string("Private Git repository URL"),
            **_GIT_SOURCE,
            "github_app_uuid": _string("GitHub App UUID"),
        },
        [*_GIT_REQUIRED, "github_app_uuid"],
    ),
    _application_source_op(
        "create_private_deploy_key_application",
        "Create a new application from a private Git repository using deploy key authentication",
        {
            "git_repository": _string("Private Git repository URL"),
            **_GIT_SOURCE,
            "private_key_uuid": _string("Private key UUID for SSH authentication"),
        },
        [*_GIT_REQUIRED, "private_key_uuid"],
    ),
    _application_source_op(
        "create_dockerfile_application",
        "Create a new application from a Dockerfile",
        {
            "dockerfile": _string("Dockerfile content (base64 encoded)"),
            "ports_exposes": _string('Ports to expose (e.g., "3000,8080")'),
        },
        ["dockerfile", "ports_exposes"],
    ),
    _application_source_op(
        "create_dockerimage_application",
        "Create a new application from a Docker image",
        {
            "docker_registry_image_name": _string('Docker image name (e.g., "nginx", "nginx:latest", "nginx:1.21")'),
            "docker_registry_image_tag": _string("Docker image tag (optional if included in image name)"),
            "ports_exposes": _string('Ports to expose (e.g., "3000,8080")'),
        },
        ["docker_registry_image_name", "ports_exposes"],
    ),
    _application_source_op(
        "create_dockercompose_application",
        "Create a new application from Docker Compose configuration",
        {"docker_compose_raw": _string("Docker Compose YAML content (base64 encoded)")},
        ["docker_compose_raw"],
    ),
    _op(
        "update_application",
        "Update an application",
        {
            "uuid": _string("Application UUID"),
            "name": _string("Application name"),
            "description": _string("Application description"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_application", "Delete an application", "Application"),
    _uuid_op("start_application", "Start an application", "Application"),
    _uuid_op("stop_application", "Stop an application", "Application"),
    _uuid_op("restart_application", "Restart an application", "Application"),
    _op(
        "deploy_application",
        "Deploy an application",
        {
            "uuid": _string("Application UUID"),
            "tag": _string("Tag to deploy (optional)"),
            "force": _boolean("Force rebuild without cache", default=False),
        },
        ["uuid"],
    ),
    _op(
        "deploy",
        "Deploy resources by UUID or tag. Supports deploying multiple resources at once using comma-separated values",
        {
            "uuid": _string("Resource UUID(s) to deploy (comma-separated for multiple)"),
            "tag": _string("Tag(s) to deploy (comma-separated for multiple)"),
            "force": _boolean("Force rebuild without cache", default=False),
        },
    ),
    _op(
        "execute_command",
        "Execute a command in an application container. "
        "NOTE: This endpoint is not available in the Coolify API and will return an error",
        {"uuid": _string("Application UUID"), "command": _string("Command to execute")},
        ["uuid", "command"],
    ),
    _logs_op("get_application_logs", "Get application logs", "Application"),
    *_env_ops("application", "Application"),
    _uuid_op("get_application_deployments", "Get all deployments for an application", "Application"),
    # Services
    _op("list_services", "List all services"),
    _uuid_op("get_service", "Get service details by UUID", "Service"),
    _op(
        "create_service",
        "Create a new service",
        {
            "type": _string("Service type"),
            "name": _string("Service name"),
            "project_uuid": _string("Project UUID"),
            "environment_name": _string("Environment name"),
            "server_uuid": _string("Server UUID"),
        },
        ["type", "name", "project_uuid", "environment_name", "server_uuid"],
    ),
    _op(
        "update_service",
        "Update a service",
        {
            "uuid": _string("Service UUID"),
            "name": _string("Service name"),
            "description": _string("Service description"),
            "docker_compose_raw": _string("Docker Compose raw content (base64 encoded)"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_service", "Delete a service", "Service"),
    _uuid_op("start_service", "Start a service", "Service"),
    _uuid_op("stop_service", "Stop a service", "Service"),
    _uuid_op("restart_service", "Restart a service", "Service"),
    _logs_op(
        "get_service_logs",
        "Get logs from a service. NOTE: Service logs are not exposed via the Coolify API and this returns an error",
        "Service",
    ),
    *_env_ops("service", "Service"),
    # Databases
    _op("list_databases", "List all databases"),
    _uuid_op("get_database", "Get database details by UUID", "Database"),
    _op(
        "create_database",
        "Create a new database. Valid types: postgresql, mysql, mariadb, mongodb, redis, clickhouse, dragonfly, keydb",
        {
            "name": _string("Database name"),
            "type": _string("Database type (postgresql, mysql, mariadb, mongodb, redis, clickhouse, dragonfly, keydb)"),
            "project_uuid": _string("Project UUID"),
            "environment_name": _string("Environment name"),
            "server_uuid": _string("Server UUID"),
        },
        ["name", "type", "project_uuid", "environment_name", "server_uuid"],
    ),
    _op(
        "update_database",
        "Update a database",
        {
            "uuid": _string("Database UUID"),
            "name": _string("Database name"),
            "description": _string("Database description"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_database", "Delete a database", "Database"),
    _uuid_op("start_database", "Start a database", "Database"),
    _uuid_op("stop_database", "Stop a database", "Database"),
    _uuid_op("restart_database", "Restart a database", "Database"),
    _uuid_op("get_database_backups", "Get backup configurations for a database", "Database"),
    _op(
        "create_database_backup",
        "Create a backup configuration for a database",
        {
            "uuid": _string("Database UUID"),
            "enabled": _boolean("Enable scheduled backups", default=True),
            "frequency": _string("Backup frequency (e.g., daily, weekly)"),
            "retention": _number("Number of backups to retain"),
        },
        ["uuid"],
    ),
    _logs_op(
        "get_database_logs",
        "Get logs from a database. NOTE: Database logs are not exposed via the Coolify API and this returns an error",
        "Database",
    ),
    # Deployments
    _op("list_deployments", "List all deployments"),
    _uuid_op("get_deployment", "Get deployment details", "Deployment"),
    _uuid_op("cancel_deployment", "Cancel a deployment", "Deployment"),
    # Private keys
    _op("list_private_keys", "List all SSH private keys"),
    _uuid_op("get_private_key", "Get a private key by UUID", "Private key"),
    _op(
        "create_private_key",
        "Create a new SSH private key",
        {
            "name": _string("Key name"),
            "description": _string("Key description"),
            "private_key": _string("Private key content (PEM format)"),
        },
        ["name", "private_key"],
    ),
    _op(
        "update_private_key",
        "Update a private key",
        {
            "uuid": _string("Private key UUID"),
            "name": _string("Key name"),
            "description": _string("Key description"),
            "private_key": _string("Private key content (PEM format)"),
        },
        ["uuid"],
    ),
    _uuid_op("delete_private_key", "Delete a private key", "Private key"),
    # GitHub Apps
    _op("list_github_apps", "List all GitHub Apps configured in Coolify"),
    _op(
        "create_github_app",
        "Create a new GitHub App configuration",
        {
            "name": _string("GitHub App name"),
            "organization": _string("GitHub organization (optional)"),
            "api_url": _string("GitHub API URL (for GitHub Enterprise)"),
            "html_url": _string("GitHub HTML URL (for GitHub Enterprise)"),
            "custom_user": _string("Custom Git user"),
            "custom_port": _number("Custom Git port"),
            "is_system_wide": _boolean("Make available system-wide", default=False),
        },
        ["name"],
    ),
    _op("get_github_app", "Get GitHub App details by ID", _GITHUB_APP_ID, ["github_app_id"]),
    _op(
        "update_github_app",
        "Update a GitHub App configuration",
        {
            **_GITHUB_APP_ID,
            "name": _string("GitHub App name"),
            "organization": _string("GitHub organization"),
            "api_url": _string("GitHub API URL"),
            "html_url": _string("GitHub HTML URL"),
            "custom_user": _string("Custom Git user"),
            "custom_port": _number("Custom Git port"),
            "is_system_wide": _boolean("Make available system-wide"),
        },
        ["github_app_id"],
    ),
    _op("delete_github_app", "Delete a GitHub App configuration", _GITHUB_APP_ID, ["github_app_id"]),
    _op(
        "get_github_app_repositories",
        "Get repositories accessible by a GitHub App",
        _GITHUB_APP_ID,
        ["github_app_id"],
    ),
    _op(
        "get_github_app_repository_branches",
        "Get branches of a repository accessible by a GitHub App",
        {**_GITHUB_APP_ID, "owner": _string("Repository owner"), "repo": _string("Repository name")},
        ["github_app_id", "owner", "repo"],
    ),
    # Resources
    _op("list_resources", "List all resources (applications, services, databases)"),
]

REGISTRY = OperationRegistry(_OPERATIONS)


def is_dangerous_operation(name: str) -> bool:
    return name in DANGEROUS_OPERATIONS


def get_danger_warning(name: str) -> str:
    return DANGER_WARNINGS.get(name, DEFAULT_DANGER_WARNING)
