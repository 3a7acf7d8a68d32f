from contextlib import asynccontextmanager
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient


def _lifespan_ctx():
    @asynccontextmanager
    async def _lifespan(app):  # noqa: ARG001 - app unused
        yield

    return _lifespan


def _reload_api_with_mocks(protocol: str = "http"):
    import importlib
    import honeycomb_mcp.settings as settings_mod

    server_mock = Mock()
    server_mock.api.get_environments.return_value = ["prod", "eu"]
    mcp_mock = Mock()
    http_app_mock = Mock()
    http_app_mock.lifespan = _lifespan_ctx()
    mcp_mock.http_app.return_value = http_app_mock
    server_mock.mcp = mcp_mock

    sse_app_mock = Mock()
    sse_app_mock.lifespan = _lifespan_ctx()

    with patch("honeycomb_mcp.server.HoneycombMCPServer", return_value=server_mock), \
            patch("fastmcp.server.http.create_sse_app", return_value=sse_app_mock) as create_sse, \
            patch.object(settings_mod.settings, "MCP_TRANSPORT_PROTOCOL", protocol):
        import honeycomb_mcp.api as api_module

        importlib.reload(api_module)
        return api_module, mcp_mock, create_sse


def test_app_health_structure_and_defaults():
    api, _, _ = _reload_api_with_mocks()
    client = TestClient(api.app)

    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    for key in ["status", "service", "transport_protocol", "mcp_endpoint", "environments"]:
        assert key in data
    assert data["service"] == "honeycomb-mcp-server"
    assert data["mcp_endpoint"] == "/mcp"
    assert data["environments"] == ["prod", "eu"]
    assert resp.headers["content-type"].startswith("application/json")


def test_http_transport_wiring_on_import():
    api, mcp_mock, create_sse = _reload_api_with_mocks("http")

    mcp_mock.http_app.assert_called_once_with(path="/mcp")
    create_sse.assert_not_called()
    assert api.mcp_endpoint == "/mcp"


def test_sse_transport_wiring_on_import():
    api, mcp_mock, create_sse = _reload_api_with_mocks("sse")

    create_sse.assert_called_once()
    mcp_mock.http_app.assert_not_called()
    assert api.mcp_endpoint == "/sse"


def test_routes_blocked_after_mount():
    api, _, _ = _reload_api_with_mocks()

    with pytest.raises(RuntimeError):
        api.app.add_api_route("/late", lambda: None)
