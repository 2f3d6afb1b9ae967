# entwine/configs/store.py
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from entwine.configs.values import ConfigValue, ModConfig, validateConfigValue, validateModConfig
from entwine.core.dictpath import setByPath
from entwine.core.errors import ConfigCorruptError, FileSystemError, PathNotFoundError
from entwine.core.fsutils import atomicWriteText, isTempArtifact
from entwine.core.locks import KeyedLocks, MOD_CONFIG_LOCKS, pathKey
from entwine.core.utils import deepCopy, deepEquals

logger = logging.getLogger(__name__)

__all__ = ["ConfigReadResult", "ModConfigStore", "CONFIG_SUBDIR"]

# ------------------------------------------------------------------ #
# Layout under a game directory
# ------------------------------------------------------------------ #
# Silk/Config/Mods/<modId>.yaml        # one document per mod
# Silk/Config/Mods/<modId>.yaml.corrupt-<ts>  # unreadable document set aside before a rewrite
#
CONFIG_SUBDIR = Path("Silk") / "Config" / "Mods"
CONFIG_SUFFIX = ".yaml"



@dataclass(frozen=True)
class ConfigReadResult:
    config: ModConfig
    # Set when the stored document was unreadable and `config` is the empty default
    warning: ConfigCorruptError | None = None



def _checkModId(modId: str) -> str:
    modId = str(modId or "").strip()
    if not modId or modId in (".", "..") or any(sep in modId for sep in ("/", "\\", "\0")):
        raise ValueError(f"Invalid mod id {modId!r}")
    return modId



def _plainScalars(node: Any) -> Any:
    # YAML resolves unquoted timestamps to date objects; keep them as the text the user wrote
    if isinstance(node, (date, datetime)):
        return node.isoformat()
    if isinstance(node, list):
        return [_plainScalars(item) for item in node]
    if isinstance(node, dict):
        return {key: _plainScalars(value) for key, value in node.items()}
    return node



class ModConfigStore:
    """
    Per-mod YAML configuration documents under a game installation.

      - read: never locks, never fails for absence; corrupt → empty + warning
      - write: full document via temp file + os.replace
      - setValue: read-modify-write serialized per (gamePath, modId)
    """

    def __init__(self, *, locks: KeyedLocks = MOD_CONFIG_LOCKS) -> None:
        self._locks = locks

    # ----- Helpers -----

    def configDir(self, gamePath: str | Path) -> Path:
        return Path(gamePath) / CONFIG_SUBDIR

    def documentPath(self, gamePath: str | Path, modId: str) -> Path:
        return self.configDir(gamePath) / f"{_checkModId(modId)}{CONFIG_SUFFIX}"

    def _lockKey(self, gamePath: str | Path, modId: str) -> tuple[str, str]:
        return (pathKey(gamePath), _checkModId(modId))

    def _requireGameDir(self, gamePath: str | Path) -> None:
        if not Path(gamePath).is_dir():
            raise PathNotFoundError(f"Game directory '{gamePath}' does not exist", details={"gamePath": str(gamePath)})

    def _read(self, docPath: Path, modId: str) -> ConfigReadResult:
        try:
            text = docPath.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ConfigReadResult(config={})
        except OSError as err:
            raise FileSystemError(f"Failed to read config for '{modId}': {err}", details={"path": str(docPath)}) from err

        try:
            parsed = yaml.safe_load(text)
            if parsed is None:
                # Empty file is an empty document
                return ConfigReadResult(config={})
            return ConfigReadResult(config=validateModConfig(_plainScalars(parsed)))
        except (yaml.YAMLError, ValueError) as err:
            warning = ConfigCorruptError(
                f"Config for '{modId}' is unreadable, using defaults: {err}",
                details={"modId": modId, "path": str(docPath)},
            )
            logger.warning("%s", warning.message)
            return ConfigReadResult(config={}, warning=warning)

    def _write(self, docPath: Path, doc: ModConfig) -> None:
        text = yaml.safe_dump(doc, sort_keys=False, allow_unicode=True, default_flow_style=False)
        try:
            atomicWriteText(docPath, text)
        except OSError as err:
            raise FileSystemError(f"Failed to write config '{docPath.name}': {err}", details={"path": str(docPath)}) from err

    def _setAside(self, docPath: Path) -> Path:
        target = docPath.with_name(f"{docPath.name}.corrupt-{int(time.time())}")
        try:
            docPath.replace(target)
        except OSError as err:
            raise FileSystemError(f"Failed to set aside corrupt config '{docPath.name}': {err}") from err
        logger.warning("Moved unreadable config '%s' to '%s'", docPath, target.name)
        return target

    # ----- Public API -----

    def loadModConfig(self, gamePath: str | Path, modId: str) -> ConfigReadResult:
        return self._read(self.documentPath(gamePath, modId), modId)

    def getModConfig(self, gamePath: str | Path, modId: str) -> ModConfig:
        return self.loadModConfig(gamePath, modId).config

    def saveModConfig(self, gamePath: str | Path, modId: str, doc: Any) -> None:
        validated = validateModConfig(doc)
        self._requireGameDir(gamePath)
        docPath = self.documentPath(gamePath, modId)
        with self._locks.hold(self._lockKey(gamePath, modId)):
            self._write(docPath, validated)
        logger.info("Saved config for '%s' (%d keys)", modId, len(validated))

    def setModConfigValue(self, gamePath: str | Path, modId: str, key: str, value: Any) -> ModConfig:
        """
        Sets one key and returns the resulting document.

        `key` is a dotted path; intermediate mappings are created as needed
        (escape a literal dot with a backslash).
        """
        validatedValue: ConfigValue = validateConfigValue(value, path=key)
        self._requireGameDir(gamePath)
        docPath = self.documentPath(gamePath, modId)

        with self._locks.hold(self._lockKey(gamePath, modId)):
            current = self._read(docPath, modId)
            if current.warning is not None:
                self._setAside(docPath)
            doc = deepCopy(current.config)
            try:
                setByPath(doc, key, validatedValue, createIfMissing=True)
            except (KeyError, TypeError) as err:
                raise ValueError(f"Cannot set '{key}' for '{modId}': {err}") from err

            if current.warning is None and deepEquals(doc, current.config):
                logger.debug("Config '%s' already has %s=%r", modId, key, validatedValue)
                return doc
            self._write(docPath, doc)

        logger.info("Set config '%s' %s=%r", modId, key, validatedValue)
        return doc

    def listModConfigs(self, gamePath: str | Path) -> list[str]:
        configDir = self.configDir(gamePath)
        if not configDir.is_dir():
            return []
        return sorted(
            entry.name[: -len(CONFIG_SUFFIX)]
            for entry in configDir.iterdir()
            if entry.is_file() and entry.name.endswith(CONFIG_SUFFIX) and not isTempArtifact(entry.name)
        )

    def deleteModConfig(self, gamePath: str | Path, modId: str) -> bool:
        """Removes the document. Returns False (not an error) when it was already gone."""
        docPath = self.documentPath(gamePath, modId)
        with self._locks.hold(self._lockKey(gamePath, modId)):
            try:
                docPath.unlink()
            except FileNotFoundError:
                logger.debug("Config for '%s' already absent", modId)
                return False
            except OSError as err:
                raise FileSystemError(f"Failed to delete config for '{modId}': {err}", details={"path": str(docPath)}) from err
        logger.info("Deleted config for '%s'", modId)
        return True
