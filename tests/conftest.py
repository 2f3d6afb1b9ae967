import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from entwine.app.context import PROCESS_REGISTRY
from entwine.app.settings import reloadSettings
from entwine.http import client as http_client



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def entwineHome(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Every test gets its own user data dir, so no real ~/.entwine file leaks in."""
    home = tmp_path_factory.mktemp("entwine-home")
    monkeypatch.setenv("ENTWINE_HOME", str(home))
    reloadSettings()
    yield home
    reloadSettings()
    PROCESS_REGISTRY.clear()



@pytest.fixture
def gameDir(tmp_path: Path) -> Path:
    """Directory that passes game-directory validation."""
    game = tmp_path / "SpiderHeck"
    game.mkdir()
    (game / "SpiderHeck.exe").write_bytes(b"MZ")
    return game



@pytest.fixture
def modsDir(gameDir: Path) -> Path:
    mods = gameDir / "Silk" / "Mods"
    mods.mkdir(parents=True)
    return mods



@pytest.fixture
def mockHttp(monkeypatch: pytest.MonkeyPatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Routes every entwine.http.client call through `handler`."""
    originalClient = http_client.httpx.Client

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        transport = httpx.MockTransport(handler)

        class _PatchedClient(originalClient):  # type: ignore[misc, valid-type]
            def __init__(self, *args, **kwargs):
                kwargs["transport"] = transport
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(http_client.httpx, "Client", _PatchedClient)
        return transport

    return install
