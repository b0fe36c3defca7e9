"""Response models for the service's fixed endpoints.

Collection and record payloads are schema-less and returned as plain JSON.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ResourceIndex(BaseModel):
    resources: List[str] = Field(default_factory=list)


class HealthStatus(BaseModel):
    ok: bool = True
    ready: bool
    resources: List[str] = Field(default_factory=list)


class ErrorBody(BaseModel):
    error: str


class ServiceInfo(BaseModel):
    name: str
    version: str
    endpoints: List[str] = Field(default_factory=list)
