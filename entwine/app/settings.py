# entwine/app/settings.py
from __future__ import annotations
import json5
from pydantic import JsonValue
from typing import Any, cast
from functools import lru_cache

from entwine.app.paths import PACKAGE_DIR, userDataDir
from entwine.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_DEFAULT_PATH", "SETTINGS", "loadUserSettings",
    "loadSettings", "reloadSettings", "deepMerge", "settings",
]


SETTINGS_DEFAULT_PATH = PACKAGE_DIR / "settings_default.json5"
SETTINGS: JsonValue = (
    json5.loads(SETTINGS_DEFAULT_PATH.read_text(encoding="utf-8"))
    if SETTINGS_DEFAULT_PATH.exists()
    else {
        "__source": "ENTWINE_DEFAULTS",
        "catalog": {
            "baseUrl": "https://silk.abstractmelon.net",
            "modsApiPath": "/api/mods",
            "fallbackIcon": "https://silk.abstractmelon.net/assets/default-mod-icon.png",
        },
        "http": {"timeoutMs": 30_000},
        "game": {
            "installDirName": "SpiderHeck",
            "executables": ["SpiderHeck.exe", "SpiderHeck.x86_64", "SpiderHeck"],
            "launchExecutable": "SpiderHeckApp.exe",
            "steamAppId": "1329500",
        },
        "frameworks": {
            "silk": {
                "releasesUrl": "https://api.github.com/repos/SilkModding/Silk/releases",
                "downloadUrlTemplate": "https://github.com/SilkModding/Silk/releases/download/v{version}/Silk-v{version}.zip",
            },
            "bepinex": {
                "releasesUrl": "https://api.github.com/repos/BepInEx/BepInEx/releases",
                "downloadUrlTemplate": "https://github.com/BepInEx/BepInEx/releases/download/v{version}/BepInEx_win_x64_{version}.zip",
            },
        },
        "logging": {"level": "INFO", "file": None},
        "server": {"host": "127.0.0.1", "port": 7878, "corsOrigins": ["http://localhost:1420", "tauri://localhost"]},
    }
)



def loadUserSettings() -> JsonValue:
    filePath = userDataDir() / "entwine.json5"
    if filePath.exists():
        try:
            return json5.loads(filePath.read_text(encoding="utf-8"))
        except ValueError as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
    return {}



@lru_cache(maxsize=1)
def loadSettings():
    return deepMerge(SETTINGS, loadUserSettings())



def reloadSettings():
    """Drops the cached merge so the next read picks up user file changes."""
    loadSettings.cache_clear()
    return loadSettings()



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types (lists, strings, numbers, booleans, null),
    the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = {}
        for key, value in first.items():
            out[key] = cast(JsonValue, value)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], cast(JsonValue, value))
            else:
                out[key] = cast(JsonValue, value)
        return cast(JsonValue, out)

    # If not both dicts, replace with right-hand side
    return cast(JsonValue, second)

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None) -> Any:
    """Returns value at `path` from merged settings, or `default` if missing."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val
