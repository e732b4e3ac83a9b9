"""Pydantic schemas for service health."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    db: bool
