# entwine/frameworks/models.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = ["SilkVersion"]



class SilkVersion(BaseModel):
    """An available upgrade: the version and where its archive lives."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    version: str
    downloadUrl: str
