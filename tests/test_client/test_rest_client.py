"""Tests for the control plane REST client."""

import httpx
import pytest

from telectl.client.rest import RemotePluginClient
from telectl.config import ControlPlaneConfig
from telectl.errors import FileError, RemoteError, TransportError
from telectl.models import PluginSpec


def envelope(body, code=200, message="ok"):
    return {"meta": {"code": code, "message": message, "type": "x", "version": 1}, "body": body}


def error_response(message, fields=None, code=500):
    return httpx.Response(code, json=envelope({"message": message, "fields": fields or {}}, code=code))


LOADED = {
    "name": "mock-collector",
    "version": 3,
    "type": "collector",
    "signed": False,
    "status": "loaded",
    "loaded_timestamp": 1700000000,
    "href": "http://localhost:8181/v1/plugins/collector/mock-collector/3",
}


@pytest.fixture
def plugin_file(tmp_path):
    path = tmp_path / "snap-plugin-collector-mock"
    path.write_bytes(b"\x7fELF-plugin")
    return path


@pytest.fixture
def client():
    return RemotePluginClient(ControlPlaneConfig(url="http://control:8181/"))


class TestInit:
    def test_base_url(self, client):
        assert client.base_url == "http://control:8181/v1"

    def test_custom_api_version(self):
        client = RemotePluginClient(ControlPlaneConfig(url="http://control:8181", api_version="v2"))
        assert client.base_url == "http://control:8181/v2"

    def test_requires_url(self):
        with pytest.raises(ValueError, match="URL is required"):
            RemotePluginClient(ControlPlaneConfig.model_construct(url=""))


class TestLoad:
    def test_load_uploads_files(self, client, mock_http, plugin_file, tmp_path):
        asc = tmp_path / "snap-plugin-collector-mock.asc"
        asc.write_text("signature")
        mock_http.respond(lambda request: httpx.Response(201, json=envelope({"loaded_plugins": [LOADED]})))

        loaded = client.load_plugin([str(plugin_file), str(asc)])

        assert len(loaded) == 1
        assert loaded[0].name == "mock-collector"
        assert loaded[0].version == 3
        assert loaded[0].loaded_time.timestamp() == 1700000000
        request = mock_http.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/plugins"
        assert b"snap-plugin-collector-mock.asc" in request.content
        assert b"\x7fELF-plugin" in request.content

    def test_load_missing_file(self, client, mock_http, tmp_path):
        with pytest.raises(FileError):
            client.load_plugin([str(tmp_path / "nope")])
        assert mock_http.requests == []

    def test_load_remote_error_with_detail(self, client, mock_http, plugin_file):
        mock_http.respond(
            lambda request: error_response("Plugin is already loaded", {"error": "duplicate"}, code=409)
        )
        with pytest.raises(RemoteError) as exc_info:
            client.load_plugin([str(plugin_file)])
        assert exc_info.value.message == "Plugin is already loaded"
        assert exc_info.value.detail == "duplicate"

    def test_load_non_envelope_error(self, client, mock_http, plugin_file):
        mock_http.respond(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(RemoteError, match="502"):
            client.load_plugin([str(plugin_file)])


class TestUnload:
    def test_unload(self, client, mock_http):
        mock_http.respond_json(envelope({"name": "mock-collector", "version": 2, "type": "storage"}))

        outcome = client.unload_plugin("storage", "mock-collector", 2)

        assert (outcome.type, outcome.name, outcome.version) == ("storage", "mock-collector", 2)
        request = mock_http.requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/v1/plugins/storage/mock-collector/2"

    def test_unload_not_found(self, client, mock_http):
        mock_http.respond(lambda request: error_response("plugin not found", code=404))
        with pytest.raises(RemoteError, match="plugin not found"):
            client.unload_plugin("collector", "ghost", 1)

    def test_unexpected_body(self, client, mock_http):
        mock_http.respond_json(envelope({"unexpected": True}))
        with pytest.raises(RemoteError, match="UnloadOutcome"):
            client.unload_plugin("collector", "cpu", 1)

    def test_connection_error(self, client, mock_http):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        mock_http.respond(refuse)
        with pytest.raises(TransportError) as exc_info:
            client.unload_plugin("collector", "cpu", 1)
        assert exc_info.value.url == "http://control:8181/v1/plugins/collector/cpu/1"


class TestSwap:
    def test_swap_success(self, client, mock_http, plugin_file):
        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json=envelope({"loaded_plugins": [LOADED]}))
            return httpx.Response(200, json=envelope({"name": "old", "version": 1, "type": "collector"}))

        mock_http.respond(handler)
        outcome = client.swap_plugin([str(plugin_file)], PluginSpec("collector", "old", 1))

        assert outcome.loaded.name == "mock-collector"
        assert outcome.unloaded.name == "old"
        assert [r.method for r in mock_http.requests] == ["POST", "DELETE"]

    def test_swap_load_failure_skips_unload(self, client, mock_http, plugin_file):
        mock_http.respond(lambda request: error_response("bad plugin", code=400))
        with pytest.raises(RemoteError, match="bad plugin"):
            client.swap_plugin([str(plugin_file)], PluginSpec("collector", "old", 1))
        assert len(mock_http.requests) == 1

    def test_swap_unload_failure_leaves_new_plugin_loaded(self, client, mock_http, plugin_file):
        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json=envelope({"loaded_plugins": [LOADED]}))
            return error_response("plugin not found", code=404)

        mock_http.respond(handler)
        with pytest.raises(RemoteError) as exc_info:
            client.swap_plugin([str(plugin_file)], PluginSpec("collector", "old", 1))

        assert exc_info.value.detail == "plugin not found"
        assert exc_info.value.fields["loaded"] == "collector:mock-collector:3"
        assert [(r.method, r.url.path) for r in mock_http.requests] == [
            ("POST", "/v1/plugins"),
            ("DELETE", "/v1/plugins/collector/old/1"),
        ]

    def test_swap_unload_transport_failure(self, client, mock_http, plugin_file):
        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json=envelope({"loaded_plugins": [LOADED]}))
            raise httpx.ReadTimeout("timed out", request=request)

        mock_http.respond(handler)
        with pytest.raises(RemoteError) as exc_info:
            client.swap_plugin([str(plugin_file)], PluginSpec("collector", "old", 1))

        assert "timed out" in exc_info.value.detail
        assert exc_info.value.fields["loaded"] == "collector:mock-collector:3"
        assert len(mock_http.requests) == 2


class TestGetPlugins:
    def test_loaded(self, client, mock_http):
        mock_http.respond_json(envelope({"loaded_plugins": [LOADED]}))

        plugins = client.get_plugins()

        assert [p.name for p in plugins.loaded_plugins] == ["mock-collector"]
        assert plugins.running_plugins == []
        assert "running" not in mock_http.requests[0].url.params

    def test_running(self, client, mock_http):
        mock_http.respond_json(
            envelope(
                {
                    "running_plugins": [
                        {
                            "name": "cpu",
                            "version": 6,
                            "type": "collector",
                            "hitcount": 12,
                            "last_hit_timestamp": 1700000000,
                            "id": 1,
                            "pprof_port": "0",
                        }
                    ]
                }
            )
        )

        plugins = client.get_plugins(running=True)

        assert plugins.running_plugins[0].hitcount == 12
        assert "running" in mock_http.requests[0].url.params

    def test_basic_auth(self, mock_http):
        mock_http.respond_json(envelope({"loaded_plugins": []}))
        client = RemotePluginClient(ControlPlaneConfig(url="http://control:8181", password="secret"))

        client.get_plugins()

        assert mock_http.requests[0].headers["Authorization"].startswith("Basic ")
