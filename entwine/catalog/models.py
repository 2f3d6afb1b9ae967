# entwine/catalog/models.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = ["Mod"]



class Mod(BaseModel):
    """Catalog entry as served by the mod registry. Read-only input to the manager."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    id: str
    name: str
    description: str = ""
    version: str = ""
    author: str = ""
    fileName: str                                       # Name the mod gets inside the mods directory
    filePath: str                                       # Download source, relative to the catalog base or absolute
    fileSize: int = 0
    iconPath: str = ""
    uploadDate: str = ""
    downloads: int = 0
    lastDownloaded: str | None = None
    # Optional compatibility declaration against the primary framework
    silkVersion: str | None = None
    minSilkVersion: str | None = None
    maxSilkVersion: str | None = None
    tags: list[str] = Field(default_factory=list)
