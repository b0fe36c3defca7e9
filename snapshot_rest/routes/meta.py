"""Introspection endpoints.

Implements:
    GET /api          names of all collections
    GET /api/health   readiness plus the same names
"""

from __future__ import annotations

from fastapi import APIRouter

from snapshot_rest.db import get_db
from snapshot_rest.models import HealthStatus, ResourceIndex

router = APIRouter(tags=["Meta"])


@router.get("", response_model=ResourceIndex)
async def list_resources():
    db = get_db()
    return ResourceIndex(resources=db.collection_names())


@router.get("/health", response_model=HealthStatus)
async def health():
    db = get_db()
    return HealthStatus(ok=True, ready=db.ready, resources=db.collection_names())
