# entwine/core/jsonutils.py
from __future__ import annotations

import json
import traceback
from collections import deque
from collections.abc import Mapping, Iterable
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from entwine.core.errors import EntwineError

__all__ = ["safeJsonDumps", "serializeError", "tryJSONify"]

TRACEBACK_CHAR_LIMIT = 4000



# ------------------------------------------------
#                JSON serialization
# ------------------------------------------------

def safeJsonDumps(obj: Any) -> str:
    """
    Compact JSON for log records. Pydantic models are dumped by alias.
    If direct encoding fails, falls back to tryJSONify and retries.
    """
    payload = obj.model_dump(by_alias=True) if isinstance(obj, BaseModel) else obj
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return json.dumps(tryJSONify(payload), ensure_ascii=False, allow_nan=False, separators=(",", ":"))



# ------------------------------------------------
#              Error / Exception helpers
# ------------------------------------------------

def serializeError(err: Any, *, includeStack: bool = False) -> dict[str, Any]:
    """
    Converts an exception into a JSON-serializable dict.

    Examples:
        NotInstalledError("...") -> {"code": "NOT_INSTALLED", "message": "...", "details": {}}
        ValueError("bad")        -> {"code": "INTERNAL_ERROR", "type": "ValueError", "message": "bad", ...}
        "error text"             -> {"message": "error text"}
        None                     -> {}
    """
    if err is None:
        return {}

    if isinstance(err, str):
        return {"message": err}

    if isinstance(err, BaseException):
        if isinstance(err, EntwineError):
            data = err.toDict()
            data["details"] = tryJSONify(data["details"])
        else:
            data = {
                "code": "INTERNAL_ERROR",
                "type": err.__class__.__name__,
                "message": str(err),
                "details": {},
            }

        traceBack = getattr(err, "__traceback__", None)
        if includeStack and traceBack:
            que: deque[str] = deque()
            total = 0
            truncated = False
            for part in traceback.format_tb(traceBack):
                que.append(part)
                total += len(part)
                while total > TRACEBACK_CHAR_LIMIT and que:
                    total -= len(que.popleft())
                    truncated = True
            text = "".join(que)
            if truncated:
                text = "[TRUNCATED]" + text
            data["stack"] = text
        return data

    try:
        json.dumps(err)
        return {"message": err}
    except (TypeError, ValueError):
        return {"type": type(err).__name__, "repr": repr(err)}



# ------------------------------------------------
#              Generic JSON safety
# ------------------------------------------------

def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int = 10) -> Any:
    """
    Attempts to make any object JSON-serializable.

    Rules:
      • Basic scalars are preserved.
      • Exceptions → serializeError().
      • date/datetime → ISO8601, Enum → value, Path → str.
      • Pydantic models → model_dump(by_alias=True).
      • sets/tuples/iterables → list, Mappings → dict with str keys.
      • fallback → repr(obj)
    """
    if _seen is None:
        _seen = set()

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"
    _seen = _seen | {oid}

    if isinstance(obj, BaseException):
        return serializeError(obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    if isinstance(obj, BaseModel):
        return tryJSONify(obj.model_dump(by_alias=True), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Mapping):
        return {
            str(key): tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
            for key, value in obj.items()
        }
    if isinstance(obj, (bytes, bytearray)):
        return f"<{len(obj)} bytes>"
    if isinstance(obj, Iterable):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]

    # Last-ditch representation (avoid raising during logging)
    return repr(obj)
