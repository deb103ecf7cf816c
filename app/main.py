import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.context import AppContext
from app.routers.sessions import create_sessions_router
from app.routers.status import AVAILABLE_ENDPOINTS, create_status_router
from app.routers.testing import create_testing_router
from app.services.crash_logging import enable_crash_logging
from app.services.logging_setup import configure_logging
from app.services.session_janitor import SessionJanitor
from app.services.session_store import SessionStore
from app.services.summary_sessions import SummarySessionService
from app.settings import load_settings


def _register_error_handlers(app: FastAPI) -> None:
    logger = logging.getLogger("summarizer.api.errors")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods share the same listing.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Endpoint not found",
                    "message": f"The endpoint {request.method} {request.url.path} was not found",
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Invalid request body for %s %s", request.method, request.url.path)
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": details},
        )

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )


def create_app() -> FastAPI:
    cwd = os.getcwd()
    data_dir = os.path.join(cwd, "data")
    ctx = AppContext(
        cwd=cwd,
        data_dir=data_dir,
        config_path=os.path.join(data_dir, "config.json"),
    )
    ctx.ensure_dirs()

    configure_logging(ctx.logs_dir)
    logger = logging.getLogger("summarizer.boot")
    logger.info("Boot: starting create_app cwd=%s", cwd)
    enable_crash_logging(ctx.logs_dir)

    config = ctx.read_config()
    if config:
        logger.info("Boot: config keys=%s", sorted(config.keys()))
    else:
        logger.info("Boot: no config at %s, using environment and defaults", ctx.config_path)
    settings = load_settings(config)
    logger.info(
        "Boot: model=%s key_set=%s ttl=%ss cleanup_interval=%ss",
        settings.gemini_model,
        settings.gemini_key_set,
        settings.session_ttl_seconds,
        settings.session_cleanup_interval_seconds,
    )

    version_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "VERSION.txt")
    version = "v0.0.0"
    if os.path.exists(version_path):
        with open(version_path, "r", encoding="utf-8") as version_file:
            version = version_file.read().strip() or version

    store = SessionStore(ttl_seconds=settings.session_ttl_seconds)
    service = SummarySessionService(settings, store)
    janitor = SessionJanitor(store, interval_seconds=settings.session_cleanup_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.session_cleanup_interval_seconds > 0:
            janitor.start()
        else:
            logger.info("Boot: scheduled session cleanup disabled")
        yield
        janitor.stop()

    app = FastAPI(title="Meeting Transcript Summarizer", version=version, lifespan=lifespan)
    app.state.version = version
    app.state.ctx = ctx
    app.state.settings = settings
    app.state.session_store = store
    app.state.summary_service = service
    app.state.session_janitor = janitor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(create_status_router(service))
    app.include_router(create_sessions_router(service))
    logger.info("Boot: session routers mounted")
    if settings.enable_test_harness:
        app.include_router(create_testing_router(ctx))
        logger.info("Boot: testing router mounted")

    logger.info("Boot: create_app complete version=%s", version)
    return app
