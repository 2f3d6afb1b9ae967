# entwine/core/errors.py
from __future__ import annotations
from typing import Any

__all__ = [
    "EntwineError", "EntwineStateError",
    "InvalidGameDirectoryError", "PathNotFoundError", "AlreadyInstalledError",
    "NotInstalledError", "VersionNotFoundError", "IncompatibleVersionError",
    "NetworkError", "ConfigCorruptError", "FileSystemError", "LaunchError",
]



class EntwineError(Exception):
    """
    Base for every error a command can hand back to the caller.

    `code` is a stable identifier the frontend can switch on; `message` is
    human-readable; `details` carries whatever context the raiser had.
    """
    code = "ENTWINE_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def toDict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}



class EntwineStateError(Exception):
    """Raised when a required process-wide service was never registered."""
    pass



class InvalidGameDirectoryError(EntwineError):
    code = "INVALID_GAME_DIRECTORY"


class PathNotFoundError(EntwineError):
    code = "PATH_NOT_FOUND"


class AlreadyInstalledError(EntwineError):
    code = "ALREADY_INSTALLED"


class NotInstalledError(EntwineError):
    code = "NOT_INSTALLED"


class VersionNotFoundError(EntwineError):
    code = "VERSION_NOT_FOUND"


class IncompatibleVersionError(EntwineError):
    code = "INCOMPATIBLE_VERSION"


class NetworkError(EntwineError):
    code = "NETWORK_ERROR"


class ConfigCorruptError(EntwineError):
    """Recoverable: readers degrade to an empty document and report this as a warning."""
    code = "CONFIG_CORRUPT"


class FileSystemError(EntwineError):
    code = "FILESYSTEM_ERROR"


class LaunchError(EntwineError):
    code = "LAUNCH_FAILED"
