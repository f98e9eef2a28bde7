from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging
import os
import time

from .config import Settings, get_settings
from .frontend import FrontendFiles
from .logging_setup import setup_logging
from .routers import exam_routers, result_routers
from .storage import build_store

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # run once when app starts: open the store (dirs / tables, PIN index)
        store = build_store(settings)
        await store.startup()
        app.state.store = store
        logger.info("ExamPin started with %s storage", settings.storage_backend)
        yield
        await store.shutdown()

    app = FastAPI(title="ExamPin", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,  # which sites can call this API
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # invalid payloads are plain client errors
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.get("/api/health", tags=["Health"])
    async def health_check():
        return {"ok": True}

    app.include_router(exam_routers.router, prefix="/api")
    app.include_router(result_routers.router, prefix="/api")

    # mount the frontend last so /api routes take precedence
    if settings.public_dir and os.path.isdir(settings.public_dir):
        app.mount("/", FrontendFiles(directory=settings.public_dir, html=True), name="frontend")
    elif settings.public_dir:
        logger.warning("PUBLIC_DIR %s is not a directory; frontend not served", settings.public_dir)
    return app


app = create_app()
