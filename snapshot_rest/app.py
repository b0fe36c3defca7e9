"""Snapshot REST API server.

FastAPI application exposing every collection of a JSON snapshot as a
REST resource with filtering, search, sorting and pagination.

Start with:
    uvicorn snapshot_rest.app:app --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from snapshot_rest import __version__
from snapshot_rest.config import SnapshotRestSettings, get_settings
from snapshot_rest.db import get_db
from snapshot_rest.errors import CollectionNotFound, RecordNotFound
from snapshot_rest.loader import load_snapshot
from snapshot_rest.middleware import ReadyGateMiddleware
from snapshot_rest.models import ErrorBody, ServiceInfo
from snapshot_rest.routes.meta import router as meta_router
from snapshot_rest.routes.resources import TOTAL_COUNT_HEADER
from snapshot_rest.routes.resources import router as resources_router

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _not_found(error: str) -> JSONResponse:
    return JSONResponse(status_code=404, content=ErrorBody(error=error).model_dump())


async def _collection_not_found(request: Request, exc: CollectionNotFound) -> JSONResponse:
    return _not_found("Resource not found")


async def _record_not_found(request: Request, exc: RecordNotFound) -> JSONResponse:
    return _not_found("Not found")


def create_app(settings: Optional[SnapshotRestSettings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)
    logging.getLogger("snapshot_rest").setLevel(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Requests wait on this same load in the gate.
        logger.info("Loading snapshot (data_url=%s)", settings.data_url or "unset")
        get_db().start_loading(partial(load_snapshot, settings))
        yield

    app = FastAPI(
        title="Snapshot REST API",
        description="Schema-less REST API over an in-memory JSON snapshot",
        version=__version__,
        lifespan=lifespan,
    )

    # Ready gate
    app.add_middleware(ReadyGateMiddleware, settings=settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
        expose_headers=[TOTAL_COUNT_HEADER],
    )

    app.add_exception_handler(CollectionNotFound, _collection_not_found)
    app.add_exception_handler(RecordNotFound, _record_not_found)

    # Routes
    prefix = settings.api_prefix
    app.include_router(meta_router, prefix=prefix)
    app.include_router(resources_router, prefix=prefix)

    @app.get("/", response_model=ServiceInfo)
    async def root():
        return ServiceInfo(
            name="Snapshot REST API",
            version=__version__,
            endpoints=[
                prefix,
                f"{prefix}/health",
                f"{prefix}/{{resource}}",
                f"{prefix}/{{resource}}/{{id}}",
            ],
        )

    return app


app = create_app()
