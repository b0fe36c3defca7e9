"""Ready-gate middleware.

Every request waits here until the snapshot has been loaded into the store.
The first request starts the load itself when the application lifespan did
not run (ASGI test transports, for example).
"""

from __future__ import annotations

from functools import partial

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from snapshot_rest.config import SnapshotRestSettings
from snapshot_rest.db import get_db
from snapshot_rest.loader import load_snapshot


class ReadyGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, settings: SnapshotRestSettings) -> None:
        super().__init__(app)
        self._settings = settings

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        await get_db().wait_until_ready(partial(load_snapshot, self._settings))
        return await call_next(request)
