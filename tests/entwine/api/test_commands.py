# tests/entwine/api/test_commands.py
from __future__ import annotations
import httpx
import pytest
from fastapi.testclient import TestClient

from entwine.app.context import PROCESS_REGISTRY
from entwine.app.factory import createApp, statusCodeFor
from entwine.app.globals import getPathStore
from entwine.core.errors import EntwineStateError, FileSystemError, NetworkError, NotInstalledError
from tests.helpers import githubReleases, jsonResponse

MOD = {
    "id": "speedrun",
    "name": "Speedrun Timer",
    "description": "Shows a timer",
    "version": "1.0.0",
    "author": "someone",
    "fileName": "SpeedrunTimer.dll",
    "filePath": "/uploads/SpeedrunTimer.dll",
    "fileSize": 2,
    "iconPath": "",
    "uploadDate": "2024-05-01",
    "downloads": 0,
    "minSilkVersion": "0.6.0",
}


@pytest.fixture
def client(entwineHome, mockHttp):
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url.endswith("/api/mods"):
            return jsonResponse([MOD])
        if url.endswith("/releases"):
            return jsonResponse(githubReleases("v0.6.0", "v0.6.1"))
        if url.endswith(".dll"):
            return httpx.Response(200, content=b"MZ")
        return httpx.Response(404)

    mockHttp(handler)
    app = createApp(userDir=entwineHome, loadGamePath=False, setupLogging=False)
    with TestClient(app) as testClient:
        yield testClient


def _call(client: TestClient, command: str, **body):
    return client.post(f"/api/{command}", json=body)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_status_and_game_path(client, gameDir, tmp_path):
    assert _call(client, "get_app_status").json() == {"silkInstalled": False, "gamePath": None, "modsPath": None}

    bad = _call(client, "set_game_path", path=str(tmp_path / "nowhere"))
    assert bad.status_code == 422
    assert bad.json()["error"]["code"] == "INVALID_GAME_DIRECTORY"

    ok = _call(client, "set_game_path", path=str(gameDir))
    assert ok.status_code == 200
    assert ok.json()["modsPath"].endswith("Mods")
    assert _call(client, "get_app_status").json() == ok.json()


def test_fetch_mods(client):
    mods = _call(client, "fetch_mods").json()
    assert [m["id"] for m in mods] == ["speedrun"]
    assert mods[0]["iconPath"].endswith("default-mod-icon.png")


def test_mod_lifecycle(client, modsDir):
    modsPath = str(modsDir)

    assert _call(client, "install_mod", modInfo=MOD, modsPath=modsPath).json() is None
    again = _call(client, "install_mod", modInfo=MOD, modsPath=modsPath)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_INSTALLED"

    assert _call(client, "toggle_mod", modsPath=modsPath, fileName="SpeedrunTimer.dll", enable=False).status_code == 200
    assert _call(client, "toggle_mod", modsPath=modsPath, fileName="SpeedrunTimer.dll", enable=False).status_code == 200
    [installed] = _call(client, "get_installed_mods", modsPath=modsPath).json()
    assert (installed["id"], installed["fileName"], installed["enabled"]) == ("speedrun", "SpeedrunTimer.dll.disabled", False)

    assert _call(client, "uninstall_mod", modsPath=modsPath, fileName="SpeedrunTimer.dll").status_code == 200
    missing = _call(client, "uninstall_mod", modsPath=modsPath, fileName="SpeedrunTimer.dll")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "PATH_NOT_FOUND"


def test_install_mod_with_compatibility_gate(client, gameDir, modsDir):
    blocked = _call(client, "install_mod", modInfo=MOD, modsPath=str(modsDir), gamePath=str(gameDir), requireCompatible=True)
    assert blocked.status_code == 409
    assert blocked.json()["error"]["code"] == "INCOMPATIBLE_VERSION"
    assert list(modsDir.iterdir()) == []


def test_mod_config_commands(client, gameDir):
    game = str(gameDir)
    assert _call(client, "get_mod_config", gamePath=game, modId="speedrun").json() == {}

    _call(client, "save_mod_config", gamePath=game, modId="speedrun", configData={"a": 1, "nested": {"b": [1, "x"]}})
    _call(client, "set_mod_config_value", gamePath=game, modId="speedrun", key="c", value=True)

    resp = _call(client, "get_mod_config", gamePath=game, modId="speedrun")
    assert resp.json() == {"a": 1, "nested": {"b": [1, "x"]}, "c": True}
    assert "X-Entwine-Warning" not in resp.headers
    assert _call(client, "list_mod_configs", gamePath=game).json() == ["speedrun"]

    bad = _call(client, "set_mod_config_value", gamePath=game, modId="speedrun", key="d", value=None)
    assert bad.status_code == 400
    assert bad.json()["error"]["code"] == "INVALID_ARGUMENT"

    assert _call(client, "delete_mod_config", gamePath=game, modId="speedrun").status_code == 200
    assert _call(client, "delete_mod_config", gamePath=game, modId="speedrun").status_code == 200
    assert _call(client, "list_mod_configs", gamePath=game).json() == []


def test_corrupt_config_is_reported_in_header(client, gameDir):
    docPath = gameDir / "Silk" / "Config" / "Mods" / "broken.yaml"
    docPath.parent.mkdir(parents=True)
    docPath.write_text("a: [unclosed\n")

    resp = _call(client, "get_mod_config", gamePath=str(gameDir), modId="broken")

    assert resp.status_code == 200
    assert resp.json() == {}
    assert resp.headers["X-Entwine-Warning"] == "CONFIG_CORRUPT"


def test_silk_version_commands(client, gameDir):
    game = str(gameDir)
    notInstalled = _call(client, "get_silk_version", gamePath=game)
    assert notInstalled.status_code == 404
    assert notInstalled.json()["error"]["code"] == "NOT_INSTALLED"

    assert _call(client, "check_for_silk_updates", gamePath=game).json() is None
    assert _call(client, "get_latest_silk_version").json() == "0.6.1"
    assert _call(client, "list_available_silk_versions").json() == ["0.6.1", "0.6.0"]

    unknown = _call(client, "install_silk_version", version="9.9.9", gamePath=game)
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "VERSION_NOT_FOUND"


def test_bepinex_queries(client, gameDir):
    assert _call(client, "is_bepinex_installed", gamePath=str(gameDir)).json() is False
    assert _call(client, "uninstall_bepinex", gamePath=str(gameDir)).status_code == 404


def test_compatibility_query(client, gameDir, modsDir):
    resp = _call(client, "check_mod_compatibility", gamePath=str(gameDir), modsPath=str(modsDir), modId="speedrun")
    assert resp.json() is False


def test_app_settings_commands(client):
    assert _call(client, "get_app_settings").json() == {"launchMethod": "steam"}
    assert _call(client, "save_app_settings", settings={"launchMethod": "executable"}).status_code == 200
    assert _call(client, "get_app_settings").json() == {"launchMethod": "executable"}


def test_launch_game_missing_executable(client, gameDir):
    _call(client, "save_app_settings", settings={"launchMethod": "executable"})
    resp = _call(client, "launch_game", gamePath=str(gameDir))
    assert resp.status_code == 404


def test_missing_arguments_are_rejected(client):
    assert _call(client, "toggle_mod", modsPath="x").status_code == 422


def test_request_id_is_echoed(client):
    resp = client.post("/api/get_app_status", headers={"X-Request-Id": "abc123"})
    assert resp.headers["X-Request-Id"] == "abc123"


def test_status_code_mapping():
    assert statusCodeFor(NotInstalledError("x")) == 404
    assert statusCodeFor(NetworkError("x")) == 502
    assert statusCodeFor(FileSystemError("x")) == 500


def test_settings_endpoint_serves_merged_settings(client):
    assert client.get("/settings").json()["catalog"]["modsApiPath"] == "/api/mods"


def test_unregistered_service_is_a_state_error():
    PROCESS_REGISTRY.clear()
    with pytest.raises(EntwineStateError):
        getPathStore()


def test_upstream_failure_is_a_bad_gateway(client, mockHttp):
    mockHttp(lambda request: httpx.Response(503))
    resp = _call(client, "fetch_mods")
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "NETWORK_ERROR"
