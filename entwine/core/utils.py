# entwine/core/utils.py
from __future__ import annotations
import copy
from typing import Any, TypeVar

__all__ = ["deepCopy", "deepEquals"]

T = TypeVar("T")



def deepCopy(value: T) -> T:
    """
    Deep-copies JSON-like data so callers never share mutable state with a store.

    Raises RuntimeError when the value cannot be copied.
    """
    try:
        return copy.deepcopy(value)
    except Exception as err:
        raise RuntimeError(f"deepCopy failed - {err.__class__.__name__} {err}") from err



def deepEquals(first: Any, second: Any) -> bool:
    """
    Type-aware structural equality for JSON-like trees.

    Unlike ==, a bool never equals an int here (True != 1), so a config value
    that changed from 1 to True is seen as a change.
    Dicts: exact key set + per-key equality. Lists/tuples: positional equality.
    """
    if first is second:
        return True

    if isinstance(first, bool) or isinstance(second, bool):
        return isinstance(first, bool) and isinstance(second, bool) and first == second

    if isinstance(first, (int, float)) and isinstance(second, (int, float)):
        return first == second

    if isinstance(first, str) and isinstance(second, str):
        return first == second

    if isinstance(first, dict) and isinstance(second, dict):
        if first.keys() != second.keys():
            return False
        return all(deepEquals(first[key], second[key]) for key in first.keys())

    if isinstance(first, (list, tuple)) and isinstance(second, (list, tuple)):
        if len(first) != len(second):
            return False
        return all(deepEquals(itemA, itemB) for itemA, itemB in zip(first, second))

    if first is None or second is None:
        return first is None and second is None

    # Nah, if we end up here, just say it doesn't equal
    return False
