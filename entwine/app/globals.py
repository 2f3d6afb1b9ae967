# entwine/app/globals.py
from __future__ import annotations
from typing import Any, cast, TYPE_CHECKING

from entwine.app.context import PROCESS_REGISTRY
from entwine.core.errors import EntwineStateError

if TYPE_CHECKING:
    from entwine.app.app_settings import AppSettingsStore
    from entwine.app.path_store import PathStore
    from entwine.app.status import StatusInspector
    from entwine.catalog.client import CatalogClient
    from entwine.configs.store import ModConfigStore
    from entwine.frameworks.compatibility import CompatibilityChecker
    from entwine.frameworks.manager import FrameworkManager
    from entwine.mods.installer import ModInstaller
    from entwine.mods.scanner import ModScanner
    from entwine.mods.toggle import ModToggle



def _require(name: str, what: str) -> Any:
    service = PROCESS_REGISTRY.get(name)
    if service is None:
        raise EntwineStateError(
            f"{what} is not registered (looked up '{name}').\n"
            "createApp() builds every service; call it before handling commands."
        )
    return service



def getPathStore() -> PathStore:
    return cast("PathStore", _require("paths.store", "PathStore"))



def getStatusInspector() -> StatusInspector:
    return cast("StatusInspector", _require("status.inspector", "StatusInspector"))



def getFramework(key: str) -> FrameworkManager:
    """FrameworkManager for 'silk' or 'bepinex'."""
    return cast("FrameworkManager", _require(f"frameworks.{key}", f"FrameworkManager[{key}]"))



def getCompatibilityChecker() -> CompatibilityChecker:
    return cast("CompatibilityChecker", _require("frameworks.compatibility", "CompatibilityChecker"))



def getCatalogClient() -> CatalogClient:
    return cast("CatalogClient", _require("catalog.client", "CatalogClient"))



def getModScanner() -> ModScanner:
    return cast("ModScanner", _require("mods.scanner", "ModScanner"))



def getModInstaller() -> ModInstaller:
    return cast("ModInstaller", _require("mods.installer", "ModInstaller"))



def getModToggle() -> ModToggle:
    return cast("ModToggle", _require("mods.toggle", "ModToggle"))



def getConfigStore() -> ModConfigStore:
    return cast("ModConfigStore", _require("configs.store", "ModConfigStore"))



def getAppSettingsStore() -> AppSettingsStore:
    return cast("AppSettingsStore", _require("settings.app", "AppSettingsStore"))
