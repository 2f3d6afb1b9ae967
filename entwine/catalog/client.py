# entwine/catalog/client.py
from __future__ import annotations
import logging

from pydantic import ValidationError

from entwine.app.settings import settings
from entwine.catalog.models import Mod
from entwine.core.errors import NetworkError
from entwine.http.client import getJson

logger = logging.getLogger(__name__)

__all__ = ["CatalogClient", "resolveCatalogUrl", "resolveIconUrl"]



def _baseUrl() -> str:
    return str(settings("catalog.baseUrl", "https://silk.abstractmelon.net")).rstrip("/")



def resolveCatalogUrl(path: str) -> str:
    """Absolute http(s) URLs pass through; anything else is joined to the catalog base URL."""
    path = (path or "").strip()
    if path.lower().startswith(("http://", "https://")):
        return path
    if not path:
        return _baseUrl()
    return f"{_baseUrl()}/{path.lstrip('/')}"



def resolveIconUrl(iconPath: str | None) -> str:
    if not (iconPath or "").strip():
        return str(settings("catalog.fallbackIcon", f"{_baseUrl()}/assets/default-mod-icon.png"))
    return resolveCatalogUrl(iconPath or "")



class CatalogClient:
    """Reads the remote mod catalog. Every call goes to the network; nothing is cached."""

    def __init__(self, *, baseUrl: str | None = None, timeoutMs: int | None = None) -> None:
        self._baseUrl = baseUrl
        self._timeoutMs = timeoutMs

    @property
    def modsUrl(self) -> str:
        base = (self._baseUrl or _baseUrl()).rstrip("/")
        return f"{base}{settings('catalog.modsApiPath', '/api/mods')}"

    def fetchMods(self) -> list[Mod]:
        payload = getJson(self.modsUrl, timeoutMs=self._timeoutMs)
        if isinstance(payload, dict) and isinstance(payload.get("mods"), list):
            payload = payload["mods"]
        if not isinstance(payload, list):
            raise NetworkError(
                "Catalog answered with an unexpected payload",
                details={"url": self.modsUrl, "type": type(payload).__name__},
            )

        mods: list[Mod] = []
        for idx, raw in enumerate(payload):
            try:
                mod = Mod.model_validate(raw)
            except ValidationError as err:
                logger.warning("Skipping catalog entry #%d: %s", idx, err.errors()[:3])
                continue
            mods.append(mod.model_copy(update={"iconPath": resolveIconUrl(mod.iconPath)}))

        logger.info("Fetched %d mods from catalog (%d skipped)", len(mods), len(payload) - len(mods))
        return mods
