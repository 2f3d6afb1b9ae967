# entwine/mods/metadata.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entwine.core.fsutils import atomicWriteText
from entwine.mods.models import ModRecord
from entwine.mods.naming import baseName, canonicalName

logger = logging.getLogger(__name__)

__all__ = ["METADATA_FILE", "readSidecar", "writeSidecar", "recordKeyFor", "parseRecord", "findRecordById"]

# Lives inside the mods directory; hidden so the scanner never lists it as a mod
METADATA_FILE = ".entwine_metadata.json"



def readSidecar(modsPath: str | Path) -> dict[str, Any]:
    """
    Raw sidecar mapping of installed name ("Cool.dll", folder "Cool") -> record dict.

    Missing file → {}. Unreadable or non-object file → {} with a warning;
    the per-mod records are then rebuilt from file names by the scanner.
    """
    sidecar = Path(modsPath) / METADATA_FILE
    try:
        text = sidecar.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as err:
        logger.warning("Cannot read mod metadata '%s': %s", sidecar, err)
        return {}

    try:
        parsed = json.loads(text) if text.strip() else {}
    except ValueError as err:
        logger.warning("Mod metadata '%s' is corrupt, ignoring it: %s", sidecar, err)
        return {}

    if not isinstance(parsed, dict):
        logger.warning("Mod metadata '%s' is not a JSON object, ignoring it", sidecar)
        return {}
    return parsed



def writeSidecar(modsPath: str | Path, records: dict[str, Any]) -> None:
    """Atomic rewrite. Callers hold the modsPath lock."""
    sidecar = Path(modsPath) / METADATA_FILE
    atomicWriteText(sidecar, json.dumps(records, ensure_ascii=False, indent=2, sort_keys=True))



def recordKeyFor(records: dict[str, Any], canonical: str) -> str | None:
    """
    Sidecar key holding the record of the entry installed as `canonical`.

    Older sidecars keyed "Cool.dll" as "Cool", which is also the key of a
    folder mod "Cool"; such a key only counts when the record names this entry.
    """
    if canonical in records:
        return canonical
    legacy = baseName(canonical)
    raw = records.get(legacy)
    if legacy != canonical and isinstance(raw, dict) and canonicalName(str(raw.get("fileName") or "")) == canonical:
        return legacy
    return None



def parseRecord(raw: Any) -> ModRecord | None:
    try:
        return ModRecord.model_validate(raw)
    except ValidationError as err:
        logger.debug("Invalid metadata record %r: %s", raw, err)
        return None



def findRecordById(modsPath: str | Path, modId: str) -> ModRecord | None:
    for raw in readSidecar(modsPath).values():
        record = parseRecord(raw)
        if record is not None and record.id == modId:
            return record
    return None
