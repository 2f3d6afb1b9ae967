# entwine/api/commands.py
from __future__ import annotations
import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from entwine.app.app_settings import AppSettings
from entwine.app.globals import (
    getAppSettingsStore, getCatalogClient, getCompatibilityChecker, getConfigStore,
    getFramework, getModInstaller, getModScanner, getModToggle, getStatusInspector,
)
from entwine.app.status import AppStatus
from entwine.catalog.models import Mod
from entwine.frameworks.models import SilkVersion
from entwine.game.launch import launchGame
from entwine.mods.models import InstalledMod

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

# Set on responses whose payload was produced from a recoverable fault
WARNING_HEADER = "X-Entwine-Warning"

# Every command is a POST whose JSON body carries its camelCase arguments.
# Handlers are plain functions: FastAPI runs them in its threadpool, which is
# where the blocking file and network work belongs.



class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PathBody(_Body):
    path: str


class GamePathBody(_Body):
    gamePath: str


class ModsPathBody(_Body):
    modsPath: str


class InstallModBody(_Body):
    modInfo: Mod
    modsPath: str
    # Set both to refuse mods whose declared range excludes the installed framework
    gamePath: str | None = None
    requireCompatible: bool = False


class ModFileBody(_Body):
    modsPath: str
    fileName: str


class ToggleModBody(ModFileBody):
    enable: bool


class ModConfigBody(_Body):
    gamePath: str
    modId: str


class SaveModConfigBody(ModConfigBody):
    configData: dict[str, Any] = Field(default_factory=dict)


class SetModConfigValueBody(ModConfigBody):
    key: str
    value: Any


class InstallVersionBody(_Body):
    version: str
    gamePath: str


class CompatibilityBody(_Body):
    gamePath: str
    modsPath: str
    modId: str


class SaveAppSettingsBody(_Body):
    settings: AppSettings



# ----- Status & paths -----

@router.post("/get_app_status")
def getAppStatus() -> AppStatus:
    return getStatusInspector().getStatus()


@router.post("/set_game_path")
def setGamePath(body: PathBody) -> AppStatus:
    return getStatusInspector().setGamePath(body.path)


# ----- Catalog & mods -----

@router.post("/fetch_mods")
def fetchMods() -> list[Mod]:
    return getCatalogClient().fetchMods()


@router.post("/get_installed_mods")
def getInstalledMods(body: ModsPathBody) -> list[InstalledMod]:
    return getModScanner().getInstalledMods(body.modsPath)


@router.post("/install_mod")
def installMod(body: InstallModBody) -> None:
    if body.requireCompatible:
        if not body.gamePath:
            raise ValueError("requireCompatible needs gamePath")
        getCompatibilityChecker().enforceForMod(body.gamePath, body.modInfo)
    getModInstaller().installMod(body.modInfo, body.modsPath)


@router.post("/toggle_mod")
def toggleMod(body: ToggleModBody) -> None:
    getModToggle().toggleMod(body.modsPath, body.fileName, body.enable)


@router.post("/uninstall_mod")
def uninstallMod(body: ModFileBody) -> None:
    getModInstaller().uninstallMod(body.modsPath, body.fileName)


@router.post("/check_mod_compatibility")
def checkModCompatibility(body: CompatibilityBody) -> bool:
    return getCompatibilityChecker().checkModCompatibility(body.gamePath, body.modsPath, body.modId)


# ----- Mod configuration -----

@router.post("/get_mod_config")
def getModConfig(body: ModConfigBody):
    result = getConfigStore().loadModConfig(body.gamePath, body.modId)
    headers = {WARNING_HEADER: result.warning.code} if result.warning is not None else None
    return JSONResponse(result.config, headers=headers)


@router.post("/save_mod_config")
def saveModConfig(body: SaveModConfigBody) -> None:
    getConfigStore().saveModConfig(body.gamePath, body.modId, body.configData)


@router.post("/set_mod_config_value")
def setModConfigValue(body: SetModConfigValueBody) -> None:
    getConfigStore().setModConfigValue(body.gamePath, body.modId, body.key, body.value)


@router.post("/list_mod_configs")
def listModConfigs(body: GamePathBody) -> list[str]:
    return getConfigStore().listModConfigs(body.gamePath)


@router.post("/delete_mod_config")
def deleteModConfig(body: ModConfigBody) -> None:
    getConfigStore().deleteModConfig(body.gamePath, body.modId)


# ----- Silk -----

@router.post("/install_silk")
def installSilk(body: GamePathBody) -> None:
    getFramework("silk").install(body.gamePath)


@router.post("/uninstall_silk")
def uninstallSilk(body: GamePathBody) -> None:
    getFramework("silk").uninstall(body.gamePath)


@router.post("/get_silk_version")
def getSilkVersion(body: GamePathBody) -> str:
    return getFramework("silk").getVersion(body.gamePath)


@router.post("/get_latest_silk_version")
def getLatestSilkVersion() -> str:
    return getFramework("silk").getLatestVersion()


@router.post("/check_for_silk_updates")
def checkForSilkUpdates(body: GamePathBody) -> SilkVersion | None:
    return getFramework("silk").checkForUpdates(body.gamePath)


@router.post("/list_available_silk_versions")
def listAvailableSilkVersions() -> list[str]:
    return getFramework("silk").listAvailableVersions()


@router.post("/install_silk_version")
def installSilkVersion(body: InstallVersionBody) -> None:
    getFramework("silk").installVersion(body.version, body.gamePath)


# ----- BepInEx -----

@router.post("/is_bepinex_installed")
def isBepinexInstalled(body: GamePathBody) -> bool:
    return getFramework("bepinex").isInstalled(body.gamePath)


@router.post("/get_bepinex_version")
def getBepinexVersion(body: GamePathBody) -> str:
    return getFramework("bepinex").getVersion(body.gamePath)


@router.post("/install_bepinex")
def installBepinex(body: GamePathBody) -> None:
    getFramework("bepinex").install(body.gamePath)


@router.post("/uninstall_bepinex")
def uninstallBepinex(body: GamePathBody) -> None:
    getFramework("bepinex").uninstall(body.gamePath)


@router.post("/list_bepinex_versions")
def listBepinexVersions() -> list[str]:
    return getFramework("bepinex").listAvailableVersions()


# ----- App settings & launch -----

@router.post("/get_app_settings")
def getAppSettings() -> AppSettings:
    return getAppSettingsStore().load()


@router.post("/save_app_settings")
def saveAppSettings(body: SaveAppSettingsBody) -> None:
    getAppSettingsStore().save(body.settings)


@router.post("/launch_game")
def launchGameCommand(body: GamePathBody) -> None:
    launchGame(body.gamePath, getAppSettingsStore().load().launchMethod)
