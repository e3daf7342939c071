"""Pydantic schemas for API request/response models."""
from typing import Any
from pydantic import BaseModel


class CompileRequest(BaseModel):
    workflow: dict[str, Any]
    ui_types: list[str] | None = None
    zero_index_outputs: bool | None = None
    normalize: bool = True


class CompileResponse(BaseModel):
    workflow: dict[str, Any]
    warnings: list[str] = []


class ValidateRequest(BaseModel):
    workflow: Any


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[str] = []


class ParameterSpecSchema(BaseModel):
    node_type: str
    primary_path: str | None = None
    fallback_path: str | None = None
    type: str = "string"
    when: dict[str, str] | None = None
    description: str = ""


class InjectRequest(BaseModel):
    workflow: dict[str, Any]
    values: dict[str, Any]
    parameters: dict[str, ParameterSpecSchema]


class InjectResponse(BaseModel):
    workflow: dict[str, Any]
    warnings: list[str] = []


class SummaryResponse(BaseModel):
    node_count: int
    nodes_by_type: dict[str, list[str]] = {}
    issues: list[str] = []


class TemplateInfo(BaseModel):
    name: str
    description: str = ""
    parameters: dict[str, dict[str, Any]] = {}


class PayloadRequest(BaseModel):
    parameters: dict[str, Any] = {}


class PayloadResponse(BaseModel):
    timestamp: int
    payload: dict[str, Any]
    warnings: list[str] = []
