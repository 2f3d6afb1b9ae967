# entwine/app/status.py
from __future__ import annotations
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from entwine.app.path_store import PathStore, modsPathFor
from entwine.frameworks.manager import FrameworkManager

logger = logging.getLogger(__name__)

__all__ = ["AppStatus", "StatusInspector"]



class AppStatus(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    silkInstalled: bool
    gamePath: str | None = None
    modsPath: str | None = None



class StatusInspector:
    """Snapshot of where the game is and whether the primary framework is in it."""

    def __init__(self, pathStore: PathStore, silk: FrameworkManager) -> None:
        self._pathStore = pathStore
        self._silk = silk

    def statusFor(self, gamePath: Path | None) -> AppStatus:
        if gamePath is None:
            return AppStatus(silkInstalled=False)
        return AppStatus(
            silkInstalled=self._silk.isInstalled(gamePath),
            gamePath=str(gamePath),
            modsPath=str(modsPathFor(gamePath)),
        )

    def getStatus(self) -> AppStatus:
        # Trusts the last successful setGamePath; only the framework flag is read again
        return self.statusFor(self._pathStore.gamePath)

    def setGamePath(self, path: str | Path) -> AppStatus:
        return self.statusFor(self._pathStore.setGamePath(path))
