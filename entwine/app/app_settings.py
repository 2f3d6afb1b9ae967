# entwine/app/app_settings.py
from __future__ import annotations
import logging
import threading
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from entwine.app.paths import userDataDir
from entwine.app.state_file import StateFile
from entwine.core.errors import FileSystemError

logger = logging.getLogger(__name__)

__all__ = ["LaunchMethod", "AppSettings", "AppSettingsStore"]



class LaunchMethod(str, Enum):
    STEAM = "steam"
    EXECUTABLE = "executable"



class AppSettings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=False)

    launchMethod: LaunchMethod = LaunchMethod.STEAM



class AppSettingsStore:
    """User preferences in `<userDataDir>/settings.json`. Unreadable file → defaults."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._file = StateFile(path or userDataDir() / "settings.json")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> AppSettings:
        with self._lock:
            self._file.load()
            try:
                return AppSettings.model_validate(self._file.to_dict())
            except ValidationError as err:
                logger.warning("Ignoring invalid app settings in '%s': %s", self.path, err.errors()[:3])
                return AppSettings()

    def save(self, appSettings: AppSettings) -> AppSettings:
        with self._lock:
            for key, value in appSettings.model_dump(by_alias=True, mode="json").items():
                self._file.set(key, value)
            try:
                self._file.save()
            except OSError as err:
                raise FileSystemError(f"Failed to save settings: {err}", details={"path": str(self.path)}) from err
        logger.info("Saved app settings (launchMethod=%s)", appSettings.launchMethod.value)
        return appSettings
