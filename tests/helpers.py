# tests/helpers.py
from __future__ import annotations
import io
import zipfile

import httpx


def makeZip(files: dict[str, bytes | str]) -> bytes:
    """In-memory zip with the given member names and contents."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buf.getvalue()


def jsonResponse(payload, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=payload, headers={"Content-Type": "application/json"})


def githubReleases(*tags: str, drafts: tuple[str, ...] = (), prereleases: tuple[str, ...] = ()) -> list[dict]:
    """Minimal GitHub releases API payload."""
    return [
        {"tag_name": tag, "draft": tag in drafts, "prerelease": tag in prereleases, "assets": []}
        for tag in tags
    ]
