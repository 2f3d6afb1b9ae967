# entwine/http/client.py
from __future__ import annotations
import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from entwine.app.settings import settings
from entwine.core.errors import NetworkError

logger = logging.getLogger(__name__)

__all__ = ["request", "getJson", "download", "defaultTimeoutMs"]

USER_AGENT = "entwine-mod-manager"



def defaultTimeoutMs() -> int:
    return int(settings("http.timeoutMs", 30_000))



def request(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeoutMs: int | None = None,
    followRedirects: bool = True
) -> dict[str, Any]:
    """
    Blocking outbound HTTP call with a bounded timeout and no retries.

    Returns:
    {
        "status": int,
        "headers": dict[str,str],
        "text": str,
        "content": bytes,
        "json": Any? # Present when response looks like JSON and parses
    }

    Raises NetworkError on transport failure, timeout, or any status >= 400.
    Retrying is the caller's decision.
    """
    if timeoutMs is None:
        timeoutMs = defaultTimeoutMs()
    if timeoutMs <= 0:
        timeoutMs = 1
    timeout = httpx.Timeout(timeoutMs / 1_000)
    method = str(method).upper()
    host = urlparse(url).hostname

    mergedHeaders = {"User-Agent": USER_AGENT}
    mergedHeaders.update(headers or {})

    try:
        with httpx.Client(timeout=timeout, follow_redirects=followRedirects) as cli:
            resp = cli.request(method, url, headers=mergedHeaders, params=params)
    except httpx.TimeoutException as err:
        logger.warning("HTTP %s %s timed out after %dms", method, url, timeoutMs)
        raise NetworkError(
            f"Request to {host} timed out after {timeoutMs}ms",
            details={"url": url, "timeoutMs": timeoutMs},
        ) from err
    except httpx.HTTPError as err:
        logger.warning("HTTP %s %s failed: %s", method, url, err)
        raise NetworkError(
            f"Request to {host} failed: {err}",
            details={"url": url, "error": type(err).__name__},
        ) from err

    status = resp.status_code
    if status >= 400:
        logger.warning("HTTP %s %s answered %d", method, url, status)
        raise NetworkError(
            f"HTTP {status} from {host}",
            details={"url": url, "status": status, "bodyPreview": resp.text[:200]},
        )

    out: dict[str, Any] = {
        "status": status,
        "headers": dict(resp.headers), # note: Duplicate header keys are collapsed
        "text": resp.text,
        "content": resp.content,
    }

    # Best-effort JSON parse
    ctype = resp.headers.get("Content-Type", "")
    if "json" in ctype.lower():
        try:
            out["json"] = resp.json()
        except ValueError:
            # Keep going; caller still has "text"
            pass

    logger.debug("HTTP %s %s -> %d (%d bytes)", method, url, status, len(resp.content))
    return out



def getJson(url: str, *, timeoutMs: int | None = None, headers: dict[str, str] | None = None) -> Any:
    """GET that insists on a JSON body; anything else is a NetworkError."""
    response = request("GET", url, headers={"Accept": "application/json", **(headers or {})}, timeoutMs=timeoutMs)
    if "json" in response:
        return response["json"]
    try:
        return json.loads(response["text"])
    except ValueError as err:
        raise NetworkError(
            f"Malformed JSON from {urlparse(url).hostname}",
            details={"url": url, "bodyPreview": response["text"][:200]},
        ) from err



def download(url: str, *, timeoutMs: int | None = None) -> bytes:
    """Fetches the full body of `url` as bytes."""
    response = request("GET", url, timeoutMs=timeoutMs)
    content = response["content"]
    logger.info("Downloaded %d bytes from %s", len(content), url)
    return content
