from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Health status")
    configured: bool = Field(description="Whether Binocs credentials have been resolved")


class SchemaResponse(BaseModel):
    provider: dict[str, Any]
    resources: dict[str, dict[str, Any]]


class ResourceConfigRequest(BaseModel):
    config: dict[str, Any] = Field(default_factory=dict)


class ResourceUpdateRequest(BaseModel):
    prior_state: dict[str, Any] = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)


class ImportRequest(BaseModel):
    id: str = Field(..., min_length=1)


class DiagnosticResponse(BaseModel):
    field: str
    message: str


class ValidateResponse(BaseModel):
    valid: bool
    diagnostics: list[DiagnosticResponse] = Field(default_factory=list)


class ResourceStateResponse(BaseModel):
    type: str
    id: str
    state: dict[str, Any]
    replaced: bool = False
