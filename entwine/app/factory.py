# entwine/app/factory.py
from __future__ import annotations
import logging
import uuid
from collections.abc import Sequence
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from entwine.app.app_settings import AppSettingsStore
from entwine.app.context import PROCESS_REGISTRY
from entwine.app.path_store import PathStore
from entwine.app.settings import settings
from entwine.app.status import StatusInspector
from entwine.catalog.client import CatalogClient
from entwine.configs.store import ModConfigStore
from entwine.core.errors import (
    AlreadyInstalledError, EntwineError, IncompatibleVersionError, InvalidGameDirectoryError,
    NetworkError, NotInstalledError, PathNotFoundError, VersionNotFoundError,
)
from entwine.core.jsonutils import serializeError
from entwine.core.logging import clearLogContext, configureLogging, setLogContext
from entwine.frameworks.compatibility import CompatibilityChecker
from entwine.frameworks.manager import FrameworkManager
from entwine.frameworks.profiles import BEPINEX, SILK
from entwine.mods.installer import ModInstaller
from entwine.mods.scanner import ModScanner
from entwine.mods.toggle import ModToggle

logger = logging.getLogger(__name__)

__all__ = ["createApp", "registerServices", "statusCodeFor"]

# Anything not listed is a 500
_STATUS_BY_ERROR: tuple[tuple[type[EntwineError], int], ...] = (
    (PathNotFoundError, 404),
    (NotInstalledError, 404),
    (VersionNotFoundError, 404),
    (AlreadyInstalledError, 409),
    (IncompatibleVersionError, 409),
    (InvalidGameDirectoryError, 422),
    (NetworkError, 502),
)



def statusCodeFor(err: EntwineError) -> int:
    for errType, status in _STATUS_BY_ERROR:
        if isinstance(err, errType):
            return status
    return 500



def registerServices(*, userDir: Path | None = None, loadGamePath: bool = True) -> None:
    """Builds every service once and puts it in PROCESS_REGISTRY (replacing earlier ones)."""
    pathStore = PathStore(userDir / "state.json" if userDir else None)
    if loadGamePath:
        pathStore.load()

    silk = FrameworkManager(SILK)
    bepinex = FrameworkManager(BEPINEX)
    scanner = ModScanner()

    if pathStore.gamePath is not None:
        for framework in (silk, bepinex):
            try:
                framework.recover(pathStore.gamePath)
            except EntwineError as err:
                logger.warning("Startup recovery of %s failed: %s", framework.profile.displayName, err.message)

    services = {
        "paths.store": pathStore,
        "status.inspector": StatusInspector(pathStore, silk),
        "frameworks.silk": silk,
        "frameworks.bepinex": bepinex,
        "frameworks.compatibility": CompatibilityChecker(silk),
        "catalog.client": CatalogClient(),
        "mods.scanner": scanner,
        "mods.installer": ModInstaller(scanner=scanner),
        "mods.toggle": ModToggle(scanner=scanner),
        "configs.store": ModConfigStore(),
        "settings.app": AppSettingsStore(userDir / "settings.json" if userDir else None),
    }
    for name, service in services.items():
        PROCESS_REGISTRY.register(name, service, overwrite=True)
    logger.debug("Registered %d services", len(services))



def createApp(
    *,
    extraRouters: Sequence[APIRouter] = (),
    userDir: Path | None = None,
    loadGamePath: bool = True,
    setupLogging: bool = True,
) -> FastAPI:
    if setupLogging:
        configureLogging()
    registerServices(userDir=userDir, loadGamePath=loadGamePath)

    app = FastAPI(title="entwine")

    # ----- CORS -----
    corsOrigins = settings("server.corsOrigins", [])
    if not isinstance(corsOrigins, list):
        corsOrigins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=corsOrigins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ----- Per-command log context -----
    @app.middleware("http")
    async def commandLogContext(request: Request, callNext):
        requestId = request.headers.get("X-Request-Id") or uuid.uuid4().hex[:12]
        setLogContext(requestId=requestId, command=request.url.path.rsplit("/", 1)[-1])
        try:
            response = await callNext(request)
        finally:
            clearLogContext()
        response.headers["X-Request-Id"] = requestId
        return response

    # ----- Errors -----
    @app.exception_handler(EntwineError)
    async def entwineErrorHandler(request: Request, err: EntwineError):
        status = statusCodeFor(err)
        if status >= 500:
            logger.error("%s failed: %s", request.url.path, err.message, exc_info=err)
        else:
            logger.info("%s rejected: %s (%s)", request.url.path, err.message, err.code)
        return JSONResponse({"error": serializeError(err)}, status_code=status)

    @app.exception_handler(ValueError)
    async def valueErrorHandler(request: Request, err: ValueError):
        logger.info("%s bad argument: %s", request.url.path, err)
        payload = {"code": "INVALID_ARGUMENT", "message": str(err), "details": {}}
        return JSONResponse({"error": payload}, status_code=400)

    # ----- Routers -----
    from entwine.api.commands import router as commandsRouter
    from entwine.api.web import router as webRouter

    app.include_router(commandsRouter)
    app.include_router(webRouter)
    for router in extraRouters:
        app.include_router(router)

    logger.info("Backend initialized with %d extra router(s)", len(extraRouters))
    return app
