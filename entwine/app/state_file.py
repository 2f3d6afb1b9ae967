# entwine/app/state_file.py
from __future__ import annotations
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from entwine.core.fsutils import atomicWriteText
from entwine.core.utils import deepCopy

logger = logging.getLogger(__name__)

__all__ = ["StateFile"]



class StateFile:
    """
    Small JSON document on disk holding entwine's own state (game path, settings).

    Behavior:
        • Missing file → starts with empty dict
        • Parse error / non-object JSON → logs warning and starts with empty dict
        • save() writes via temp file + os.replace
    """
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        self._data = {}

        if not self.path.exists():
            logger.debug("%s: '%s' is missing → starting as empty dict", type(self).__name__, self.path)
            return

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as err:
            logger.error("%s: failed to read '%s': %s", type(self).__name__, self.path, err)
            return

        try:
            parsed = json.loads(text) if text.strip() else {}
        except ValueError as err:
            logger.warning("%s: parse failed for '%s': %s", type(self).__name__, self.path, err)
            parsed = {}

        if not isinstance(parsed, Mapping):
            logger.warning("%s: '%s' is not a JSON object, ignoring it", type(self).__name__, self.path)
            parsed = {}

        self._data = dict(parsed)

    def get(self, key: str, default: Any = None) -> Any:
        return deepCopy(self._data.get(key, default))

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self._data.pop(key, None)
            return
        self._data[key] = deepCopy(value)

    def to_dict(self) -> dict[str, Any]:
        return deepCopy(self._data)

    def save(self) -> None:
        out = json.dumps(self._data, ensure_ascii=False, indent=2, sort_keys=True)
        atomicWriteText(self.path, out)
        logger.debug("%s: saved %d keys to '%s'", type(self).__name__, len(self._data), self.path)
