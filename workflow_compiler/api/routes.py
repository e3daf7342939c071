"""REST API routes."""
import logging
from dataclasses import replace

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..engine.compiler import CompileOptions, compile_workflow, default_compile_options
from ..engine.errors import StructuralError, TemplateNotFoundError
from ..engine.injector import ParameterSpec, inject_parameters
from ..engine.summary import summarize_workflow
from ..engine.validator import validate_workflow
from ..models.schemas import (
    CompileRequest, CompileResponse, InjectRequest, InjectResponse,
    PayloadRequest, PayloadResponse, SummaryResponse, TemplateInfo,
    ValidateRequest, ValidateResponse,
)
from ..templates.registry import TemplateRegistry, WorkflowTemplate, build_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
template_registry = TemplateRegistry()


def _structural_error(e: StructuralError) -> HTTPException:
    logger.error("Structural error: %s", e.message)
    return HTTPException(status_code=422, detail={"message": e.message, "node_id": e.node_id})


def _options_for(request: CompileRequest) -> CompileOptions:
    options = default_compile_options(settings)
    if request.ui_types is not None:
        options = replace(options, ui_types=frozenset(request.ui_types))
    if request.zero_index_outputs is not None:
        options = replace(options, zero_index_outputs=request.zero_index_outputs)
    if not request.normalize:
        options = replace(options, type_normalizers={})
    return options


def _get_template(name: str) -> WorkflowTemplate:
    try:
        return template_registry.get(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0])) from e


def _template_info(template: WorkflowTemplate) -> TemplateInfo:
    return TemplateInfo(
        name=template.name,
        description=template.description,
        parameters={
            name: {
                "type": spec.type,
                "node_type": spec.node_type,
                "primary_path": spec.primary_path,
                "fallback_path": spec.fallback_path,
                "description": spec.description,
            }
            for name, spec in template.parameters.items()
        },
    )


@router.post("/compile", response_model=CompileResponse)
async def compile_endpoint(request: CompileRequest):
    """Compile an editor export (or pass through an execution graph)."""
    warnings: list[str] = []
    try:
        workflow = compile_workflow(request.workflow, _options_for(request), warnings)
    except StructuralError as e:
        raise _structural_error(e) from e
    return CompileResponse(workflow=workflow, warnings=warnings)


@router.post("/validate", response_model=ValidateResponse)
async def validate_endpoint(request: ValidateRequest):
    result = validate_workflow(request.workflow)
    return ValidateResponse(valid=result.valid, errors=result.errors)


@router.post("/inject", response_model=InjectResponse)
async def inject_endpoint(request: InjectRequest):
    try:
        registry = {
            name: ParameterSpec.from_dict(spec.model_dump())
            for name, spec in request.parameters.items()
        }
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    warnings: list[str] = []
    workflow = inject_parameters(request.workflow, request.values, registry, warnings)
    return InjectResponse(workflow=workflow, warnings=warnings)


@router.post("/summary", response_model=SummaryResponse)
async def summary_endpoint(request: ValidateRequest):
    summary = summarize_workflow(request.workflow)
    return SummaryResponse(
        node_count=summary.node_count,
        nodes_by_type=summary.nodes_by_type,
        issues=summary.issues,
    )


@router.get("/templates", response_model=list[TemplateInfo])
async def list_templates():
    return [_template_info(t) for t in template_registry.all()]


@router.get("/templates/{name}", response_model=TemplateInfo)
async def get_template(name: str):
    return _template_info(_get_template(name))


@router.post("/templates/{name}/payload", response_model=PayloadResponse)
async def template_payload(name: str, request: PayloadRequest):
    """Build the job submission body for a template with the given parameters."""
    template = _get_template(name)
    try:
        result = build_payload(template, request.parameters, default_compile_options(settings))
    except StructuralError as e:
        raise _structural_error(e) from e
    return PayloadResponse(timestamp=result.timestamp, payload=result.payload, warnings=result.warnings)
