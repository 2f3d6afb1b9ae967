# entwine/app/paths.py
from __future__ import annotations
import os
from pathlib import Path

__all__ = ["PACKAGE_DIR", "ROOT_DIR", "userDataDir"]



# Root directory structure constants
PACKAGE_DIR = Path(__file__).resolve().parent.parent # entwine/
ROOT_DIR = PACKAGE_DIR.parent                        # repository root



def userDataDir() -> Path:
    """
    Directory for entwine's own files (settings, persisted game path, logs).

    ENTWINE_HOME wins; otherwise ~/.entwine.
    """
    override = os.environ.get("ENTWINE_HOME")
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.entwine"))
