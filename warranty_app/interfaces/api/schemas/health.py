"""Pydantic models for the health endpoint."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ComponentHealth(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    description: str


class HealthRead(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    components: dict[str, ComponentHealth]


__all__ = ["ComponentHealth", "HealthRead"]
