import json

import httpx
import pytest

from coolify_mcp.client import CoolifyAPIError, RateLimitError
from coolify_mcp.config import CoolifyConfig, ModeConfig, Settings
from coolify_mcp.runtime import build_dispatcher
from coolify_mcp.tools.errors import InvalidArgumentsError, PermissionDeniedError, UnknownOperationError
from coolify_mcp.version import VersionGate


class VersionClient:
    def __init__(self, version):
        self.version = version

    def fetch(self, path, params=None):
        assert path == "/version"
        return self.version


def probed_gate(version):
    gate = VersionGate(VersionClient(version))
    gate.probe()
    return gate


def test_list_applications(make_dispatcher, fake_client):
    fake_client.response = [{"uuid": "app1", "name": "my-app"}]

    result = make_dispatcher().dispatch("list_applications", {})

    assert fake_client.calls == [("GET", "/applications", None)]
    assert result == [{"uuid": "app1", "name": "my-app"}]


def test_get_application_uses_uuid_in_path(make_dispatcher, fake_client):
    make_dispatcher().dispatch("get_application", {"uuid": "app1"})

    assert fake_client.calls == [("GET", "/applications/app1", None)]


def test_health_check_and_version(make_dispatcher, fake_client):
    dispatcher = make_dispatcher()

    dispatcher.dispatch("health_check", {})
    dispatcher.dispatch("get_version", None)

    assert fake_client.calls == [("GET", "/health", None), ("GET", "/version", None)]


def test_create_server_posts_arguments(make_dispatcher, fake_client):
    args = {"name": "test-server", "ip": "192.168.1.1", "private_key_uuid": "key-123"}

    make_dispatcher().dispatch("create_server", args)

    assert fake_client.calls == [("POST", "/servers", args)]


def test_missing_required_field_names_it(make_dispatcher, fake_client):
    with pytest.raises(InvalidArgumentsError, match="ip is required") as excinfo:
        make_dispatcher().dispatch("create_server", {"name": "test"})

    assert excinfo.value.field == "ip"
    assert fake_client.calls == []


def test_empty_string_counts_as_missing(make_dispatcher):
    with pytest.raises(InvalidArgumentsError, match="uuid is required"):
        make_dispatcher().dispatch("get_application", {"uuid": "  "})


def test_update_server_keeps_path_fields_out_of_body(make_dispatcher, fake_client):
    make_dispatcher().dispatch("update_server", {"uuid": "srv1", "name": "renamed", "port": 2222})

    assert fake_client.calls == [("PATCH", "/servers/srv1", {"name": "renamed", "port": 2222})]


def test_deploy_application_builds_query(make_dispatcher, fake_client):
    make_dispatcher().dispatch("deploy_application", {"uuid": "app1", "force": True})

    assert fake_client.calls == [("GET", "/deploy", {"uuid": "app1", "force": "true"})]


def test_deploy_omits_false_force(make_dispatcher, fake_client):
    make_dispatcher().dispatch("deploy", {"tag": "production", "force": False})

    assert fake_client.calls == [("GET", "/deploy", {"tag": "production"})]


def test_deploy_requires_uuid_or_tag(make_dispatcher, fake_client):
    with pytest.raises(InvalidArgumentsError, match="uuid or tag"):
        make_dispatcher().dispatch("deploy", {"force": True})

    assert fake_client.calls == []


def test_get_application_logs_passes_lines(make_dispatcher, fake_client):
    fake_client.response = {"logs": "Application started..."}

    result = make_dispatcher().dispatch("get_application_logs", {"uuid": "app1", "lines": 50})

    assert fake_client.calls == [("GET", "/applications/app1/logs", {"lines": 50})]
    assert result == {"logs": "Application started..."}


def test_get_application_logs_defaults_to_100_lines(make_dispatcher, fake_client):
    make_dispatcher().dispatch("get_application_logs", {"uuid": "app1"})

    assert fake_client.calls == [("GET", "/applications/app1/logs", {"lines": 100})]


def test_environment_path_is_quoted(make_dispatcher, fake_client):
    make_dispatcher().dispatch(
        "get_environment", {"project_uuid": "proj1", "environment_name_or_uuid": "staging env"}
    )

    assert fake_client.calls == [("GET", "/projects/proj1/staging%20env", None)]


def test_create_environment_posts_name(make_dispatcher, fake_client):
    make_dispatcher().dispatch("create_environment", {"project_uuid": "proj1", "name": "staging"})

    assert fake_client.calls == [("POST", "/projects/proj1/environments", {"name": "staging"})]


def test_bulk_env_update(make_dispatcher, fake_client):
    data = [{"key": "PORT", "value": "3000"}, {"key": "DEBUG", "value": "false"}]

    make_dispatcher().dispatch("update_service_envs_bulk", {"uuid": "svc1", "data": data})

    assert fake_client.calls == [("PATCH", "/services/svc1/envs/bulk", {"data": data})]


def test_delete_env_uses_both_ids(make_dispatcher, fake_client):
    make_dispatcher().dispatch("delete_application_env", {"uuid": "app1", "env_uuid": "env9"})

    assert fake_client.calls == [("DELETE", "/applications/app1/envs/env9", None)]


def test_github_app_branches(make_dispatcher, fake_client):
    make_dispatcher().dispatch(
        "get_github_app_repository_branches", {"github_app_id": "7", "owner": "acme", "repo": "web"}
    )

    assert fake_client.calls == [("GET", "/github-apps/7/repositories/acme/web/branches", None)]


def test_cancel_deployment_posts_without_body(make_dispatcher, fake_client):
    make_dispatcher().dispatch("cancel_deployment", {"uuid": "dep1"})

    assert fake_client.calls == [("POST", "/deployments/dep1/cancel", None)]


def test_arguments_may_be_json_string(make_dispatcher, fake_client):
    make_dispatcher().dispatch("get_server", json.dumps({"uuid": "srv1"}))

    assert fake_client.calls == [("GET", "/servers/srv1", None)]


def test_arguments_must_be_an_object(make_dispatcher):
    with pytest.raises(InvalidArgumentsError):
        make_dispatcher().dispatch("get_server", "[1, 2]")


@pytest.mark.parametrize("name", ["get_service_logs", "get_database_logs"])
def test_logs_not_exposed_by_api(make_dispatcher, fake_client, name):
    result = make_dispatcher().dispatch(name, {"uuid": "res1", "lines": 200})

    assert fake_client.calls == []
    assert "not available" in result["error"]


def test_execute_command_not_exposed_by_api(make_dispatcher, fake_client):
    result = make_dispatcher().dispatch("execute_command", {"uuid": "app1", "command": "ls"})

    assert fake_client.calls == []
    assert result["error"].endswith("not available via this API")


def test_unsupported_operation_still_validates_required(make_dispatcher):
    with pytest.raises(InvalidArgumentsError, match="command is required"):
        make_dispatcher().dispatch("execute_command", {"uuid": "app1"})


def test_unknown_tool_raises():
    from coolify_mcp.tools.dispatcher import Dispatcher

    dispatcher = Dispatcher(object(), ModeConfig(), version_gate=VersionGate(object()))

    with pytest.raises(UnknownOperationError, match="Unknown tool: unknown_tool"):
        dispatcher.dispatch("unknown_tool", {})


def test_unknown_tool_in_read_only_mode(make_dispatcher):
    with pytest.raises(UnknownOperationError):
        make_dispatcher(read_only=True).dispatch("unknown_tool", {})


# Version gating -----------------------------------------------------------


def test_logs_unavailable_on_old_beta(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(version_gate=probed_gate("4.0.0-beta.379"))

    result = dispatcher.dispatch("get_application_logs", {"uuid": "app1"})

    assert fake_client.calls == []
    assert result == {"error": "Application logs not available in this Coolify version (requires beta.380+)"}


def test_logs_available_at_threshold(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(version_gate=probed_gate("4.0.0-beta.380"))

    dispatcher.dispatch("get_application_logs", {"uuid": "app1"})

    assert len(fake_client.calls) == 1


def test_logs_available_on_stable_release(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(version_gate=probed_gate("4.1.0"))

    dispatcher.dispatch("get_application_logs", {"uuid": "app1"})

    assert len(fake_client.calls) == 1


# Confirmation gate --------------------------------------------------------


def test_dangerous_operation_runs_without_confirm_mode(make_dispatcher, fake_client):
    fake_client.response = {"message": "Application stopped"}

    result = make_dispatcher().dispatch("stop_application", {"uuid": "app1"})

    assert fake_client.calls == [("GET", "/applications/app1/stop", None)]
    assert result == {"message": "Application stopped"}


def test_confirmation_required_blocks_remote_call(make_dispatcher, fake_client):
    result = make_dispatcher(require_confirm=True).dispatch("stop_application", {"uuid": "app1"})

    assert fake_client.calls == []
    assert result["confirmation_required"] is True
    assert result["action"] == "stop_application"
    assert "stop" in result["warning"]
    assert result["example"] == {"uuid": "app1", "confirm": True}


def test_confirmed_call_runs_once(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(require_confirm=True)

    dispatcher.dispatch("delete_server", {"uuid": "srv1", "confirm": True})

    assert fake_client.calls == [("DELETE", "/servers/srv1", None)]


def test_confirm_flag_stays_out_of_query(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(require_confirm=True)

    dispatcher.dispatch("deploy_application", {"uuid": "app1", "confirm": True})

    assert fake_client.calls == [("GET", "/deploy", {"uuid": "app1"})]


def test_confirmation_checked_before_unsupported(make_dispatcher, fake_client):
    result = make_dispatcher(require_confirm=True).dispatch("execute_command", {"uuid": "app1", "command": "ls"})

    assert result["confirmation_required"] is True
    assert result["action"] == "execute_command"


def test_safe_operation_skips_confirmation(make_dispatcher, fake_client):
    make_dispatcher(require_confirm=True).dispatch("list_applications", {})

    assert fake_client.calls == [("GET", "/applications", None)]


# Read-only mode -----------------------------------------------------------


def test_read_only_blocks_writes(make_dispatcher, fake_client):
    with pytest.raises(PermissionDeniedError, match="read-only mode"):
        make_dispatcher(read_only=True).dispatch(
            "create_server", {"name": "s", "ip": "10.0.0.1", "private_key_uuid": "k"}
        )

    assert fake_client.calls == []


def test_read_only_cannot_be_bypassed_with_confirm(make_dispatcher, fake_client):
    dispatcher = make_dispatcher(read_only=True, require_confirm=True)

    with pytest.raises(PermissionDeniedError):
        dispatcher.dispatch("delete_application", {"uuid": "app1", "confirm": True})

    assert fake_client.calls == []


def test_read_only_allows_reads(make_dispatcher, fake_client):
    make_dispatcher(read_only=True).dispatch("list_servers", {})

    assert fake_client.calls == [("GET", "/servers", None)]


# Remote errors ------------------------------------------------------------


class FailingClient:
    def __init__(self, exc):
        self.exc = exc

    def fetch(self, path, params=None):
        raise self.exc


def test_remote_errors_propagate():
    from coolify_mcp.tools.dispatcher import Dispatcher

    dispatcher = Dispatcher(FailingClient(CoolifyAPIError("boom", status_code=500)), ModeConfig())

    with pytest.raises(CoolifyAPIError, match="boom"):
        dispatcher.dispatch("list_servers", {})


def test_rate_limit_propagates_as_rate_limit():
    from coolify_mcp.tools.dispatcher import Dispatcher

    dispatcher = Dispatcher(FailingClient(RateLimitError("5")), ModeConfig())

    with pytest.raises(RateLimitError) as excinfo:
        dispatcher.dispatch("list_servers", {})

    assert excinfo.value.retry_after == "5"


def test_health_check_reports_missing_endpoint():
    from coolify_mcp.tools.dispatcher import Dispatcher

    dispatcher = Dispatcher(FailingClient(CoolifyAPIError("Coolify API error 404: Not Found", status_code=404)), ModeConfig())

    result = dispatcher.dispatch("health_check", {})

    assert result == {"status": "Health check endpoint not available in this Coolify version"}


def test_health_check_rate_limit_still_raises():
    from coolify_mcp.tools.dispatcher import Dispatcher

    dispatcher = Dispatcher(FailingClient(RateLimitError("5")), ModeConfig())

    with pytest.raises(RateLimitError):
        dispatcher.dispatch("health_check", {})


# End to end ---------------------------------------------------------------


def test_application_logs_end_to_end():
    requests = []
    body = {"logs": "line 1\nline 2"}

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=body)

    settings = Settings(
        coolify=CoolifyConfig(base_url="https://coolify.example.com/", token="t"),
        mode=ModeConfig(),
    )
    dispatcher = build_dispatcher(settings, transport=httpx.MockTransport(handler), probe_version=False)

    result = dispatcher.dispatch("get_application_logs", {"uuid": "app1", "lines": 50})

    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/v1/applications/app1/logs"
    assert requests[0].url.params["lines"] == "50"
    assert result == body
