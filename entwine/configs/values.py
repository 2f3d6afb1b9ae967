# entwine/configs/values.py
from __future__ import annotations
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeAlias, Union, cast

__all__ = [
    "ConfigValue", "ModConfig", "ConfigValueKind",
    "kindOf", "validateConfigValue", "validateModConfig",
]



# Recursive variant: string | number | boolean | sequence | mapping. No null.
ConfigValue: TypeAlias = Union[str, int, float, bool, list["ConfigValue"], dict[str, "ConfigValue"]]
ModConfig: TypeAlias = dict[str, ConfigValue]



class ConfigValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SEQUENCE = "sequence"
    MAPPING = "mapping"



def kindOf(value: Any) -> ConfigValueKind:
    """
    Classifies `value` into its ConfigValue variant.

    bool is checked before int because bool is an int subclass in Python.
    Raises TypeError for anything outside the variant (None, sets, bytes, objects).
    """
    if isinstance(value, bool):
        return ConfigValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ConfigValueKind.NUMBER
    if isinstance(value, str):
        return ConfigValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ConfigValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ConfigValueKind.MAPPING
    raise TypeError(f"{type(value).__name__} is not a config value")



def validateConfigValue(value: Any, *, path: str = "$", _active: frozenset[int] = frozenset()) -> ConfigValue:
    """
    Returns a fresh, normalised copy of `value` (tuples become lists, mapping
    types become dicts), or raises ValueError naming the offending path.

    Rejects: null, non-finite numbers, non-string mapping keys, cycles.
    """
    try:
        kind = kindOf(value)
    except TypeError as err:
        raise ValueError(f"{path}: {err}") from err

    if kind is ConfigValueKind.BOOLEAN:
        return bool(value)
    if kind is ConfigValueKind.NUMBER:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"{path}: non-finite number {value!r}")
        return value
    if kind is ConfigValueKind.STRING:
        return str(value)

    oid = id(value)
    if oid in _active:
        raise ValueError(f"{path}: cyclic reference")
    active = _active | {oid}

    if kind is ConfigValueKind.SEQUENCE:
        return [
            validateConfigValue(item, path=f"{path}[{idx}]", _active=active)
            for idx, item in enumerate(value)
        ]
    if kind is ConfigValueKind.MAPPING:
        out: dict[str, ConfigValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueError(f"{path}: mapping key {key!r} is not a string")
            out[key] = validateConfigValue(item, path=f"{path}.{key}", _active=active)
        return out

    raise AssertionError(f"unhandled config value kind {kind}")



def validateModConfig(doc: Any) -> ModConfig:
    """A whole document must be a mapping at the top level."""
    if not isinstance(doc, Mapping):
        raise ValueError(f"config document must be a mapping, not {type(doc).__name__}")
    validated = validateConfigValue(doc)
    return cast(ModConfig, validated)
