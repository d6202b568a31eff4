import pytest

from coolify_mcp.config import ModeConfig
from coolify_mcp.tools.dispatcher import Dispatcher
from coolify_mcp.version import VersionGate


class FakeClient:
    """Records every call instead of talking to Coolify."""

    def __init__(self, response=None):
        self.calls = []
        self.response = {"ok": True} if response is None else response

    def fetch(self, path, params=None):
        self.calls.append(("GET", path, params))
        return self.response

    def create(self, path, payload=None):
        self.calls.append(("POST", path, payload))
        return self.response

    def update(self, path, payload=None):
        self.calls.append(("PATCH", path, payload))
        return self.response

    def remove(self, path):
        self.calls.append(("DELETE", path, None))
        return self.response


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def make_dispatcher(fake_client):
    def _make(read_only=False, require_confirm=False, version_gate=None):
        mode = ModeConfig(read_only=read_only, require_confirm=require_confirm)
        gate = version_gate if version_gate is not None else VersionGate(fake_client)
        return Dispatcher(fake_client, mode, version_gate=gate)

    return _make
