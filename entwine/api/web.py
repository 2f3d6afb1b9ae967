# entwine/api/web.py
from __future__ import annotations

import time

from fastapi import APIRouter

from entwine.app.settings import loadSettings

router = APIRouter()



@router.get("/settings")
def getSettings():
    return loadSettings()



@router.get("/health")
def health():
    return {"ok": True, "ts": int(time.time() * 1000)}
