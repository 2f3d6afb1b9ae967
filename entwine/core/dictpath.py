# entwine/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping, MutableMapping

__all__ = ["splitPath", "getByPath", "setByPath"]



# ----------------------------------------------
#                  path parsing
# ----------------------------------------------

def splitPath(path: str) -> list[str]:
    """
    Splits a dotted path into segments. A backslash escapes the next
    character, so a key that itself contains a dot stays addressable.

    Examples:
      - graphics.fullscreen  -> ["graphics", "fullscreen"]
      - keys.jump\\.height   -> ["keys", "jump.height"]

    Raises ValueError on empty paths, empty segments ("a..b", ".a", "a.")
    and a dangling trailing backslash.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")

    parts: list[str] = []
    curr: list[str] = []
    esc = False
    for ch in path:
        if esc:
            curr.append(ch)
            esc = False
            continue
        if ch == "\\":
            esc = True
            continue
        if ch == ".":
            parts.append("".join(curr))
            curr = []
            continue
        curr.append(ch)
    if esc:
        raise ValueError(f"Path '{path}' ends with a dangling escape")
    parts.append("".join(curr))

    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



# ----------------------------------------------
#                   Public API
# ----------------------------------------------

def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """Returns the value at `path` inside nested mappings, or `default` when unreachable."""
    try:
        parts = splitPath(path)
    except ValueError:
        # Invalid path is treated as "not found"
        return default

    current: Any = obj
    for part in parts:
        if isinstance(current, Mapping) and part in current:
            current = current[part]
            continue
        return default
    return current



def setByPath(obj: MutableMapping[str, Any], path: str, value: Any, *, createIfMissing: bool = False) -> None:
    """
    Sets the value at `path`.

    Missing intermediate mappings are created only when createIfMissing=True,
    otherwise KeyError. Walking through a non-mapping value raises TypeError.
    """
    parts = splitPath(path)

    current: Any = obj
    for part in parts[:-1]:
        if not isinstance(current, MutableMapping):
            raise TypeError(f"Cannot descend into '{part}': parent is {type(current).__name__}, not a mapping")
        if part not in current:
            if not createIfMissing:
                raise KeyError(f"path segment '{part}' not found in mapping")
            current[part] = {}
        current = current[part]

    if not isinstance(current, MutableMapping):
        raise TypeError(f"Cannot set '{parts[-1]}': parent is {type(current).__name__}, not a mapping")
    current[parts[-1]] = value
