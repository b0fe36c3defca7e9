"""Generic collection endpoints.

Implements:
    GET    /api/{resource}?field=value&q=&_sort=&_order=&_page=&_limit=
    GET    /api/{resource}/{id}
    POST   /api/{resource}
    PUT    /api/{resource}/{id}
    PATCH  /api/{resource}/{id}
    DELETE /api/{resource}/{id}

Unknown collections and records surface as CollectionNotFound and
RecordNotFound; the application turns both into 404 responses.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request, Response

from snapshot_rest.db import get_db
from snapshot_rest.mutations import create_record, delete_record, merge_record, replace_record
from snapshot_rest.query import ListQuery, run_query

router = APIRouter(tags=["Resources"])

TOTAL_COUNT_HEADER = "X-Total-Count"


@router.get("/{resource}")
async def list_records(resource: str, request: Request, response: Response):
    db = get_db()
    records = db.get_collection(resource)
    result = run_query(records, ListQuery.from_params(request.query_params))
    response.headers[TOTAL_COUNT_HEADER] = str(result.total)
    return result.items


@router.get("/{resource}/{record_id}")
async def get_record(resource: str, record_id: str):
    db = get_db()
    return db.get_record(resource, record_id)


@router.post("/{resource}", status_code=201)
async def create(resource: str, body: Optional[Dict[str, Any]] = Body(None)):
    return create_record(get_db(), resource, body)


@router.put("/{resource}/{record_id}")
async def replace(resource: str, record_id: str, body: Optional[Dict[str, Any]] = Body(None)):
    return replace_record(get_db(), resource, record_id, body)


@router.patch("/{resource}/{record_id}")
async def merge(resource: str, record_id: str, body: Optional[Dict[str, Any]] = Body(None)):
    return merge_record(get_db(), resource, record_id, body)


@router.delete("/{resource}/{record_id}")
async def delete(resource: str, record_id: str):
    return delete_record(get_db(), resource, record_id)
