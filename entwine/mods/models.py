# entwine/mods/models.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = ["InstalledMod", "ModRecord", "ModVersionInfo"]



class InstalledMod(BaseModel):
    """Disk-derived view of one mod; rebuilt on every scan, never cached."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    fileName: str
    enabled: bool
    version: str
    author: str
    description: str
    iconPath: str



class ModRecord(BaseModel):
    """One entry of the metadata sidecar, captured from the catalog at install time."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    fileName: str
    version: str = "Unknown"
    author: str = "Unknown"
    description: str = ""
    iconPath: str = ""
    silkVersion: str | None = None
    minSilkVersion: str | None = None
    maxSilkVersion: str | None = None



class ModVersionInfo(BaseModel):
    """A mod's declared compatibility range against the primary framework."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    modId: str
    version: str
    silkVersion: str
    minSilkVersion: str | None = None
    maxSilkVersion: str | None = None
