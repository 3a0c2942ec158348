import logging

from fastapi import FastAPI, HTTPException

from binocs_provider.api_schemas import (
    DiagnosticResponse,
    HealthResponse,
    ImportRequest,
    ResourceConfigRequest,
    ResourceStateResponse,
    ResourceUpdateRequest,
    SchemaResponse,
    ValidateResponse,
)
from binocs_provider.config import settings
from binocs_provider.provider import Provider
from binocs_provider.resource_data import ResourceData
from binocs_provider.resources.base import Resource, ResourceError, ResourceNotFoundError
from binocs_provider.validation import ConfigValidationError

logger = logging.getLogger(__name__)
provider = Provider()

app = FastAPI(
    title="Binocs Provider",
    version="1.0.0",
    description=(
        "Exposes the binocs_check and binocs_channel resources to a host "
        "orchestrator: validation, create, read, update, delete and import."
    ),
)


def _validation_detail(exc: ConfigValidationError) -> list[dict[str, str]]:
    return [e.to_dict() for e in exc.errors]


def _resource(type_name: str, *, configured: bool = True) -> Resource:
    if type_name not in provider.resource_types():
        raise HTTPException(status_code=404, detail=f"Unknown resource type: {type_name}")
    if configured and not provider.configured:
        try:
            provider.configure(
                settings.BINOCS_ACCESS_KEY or None,
                settings.BINOCS_SECRET_KEY or None,
                base_url=settings.BINOCS_API_URL,
                timeout_s=settings.BINOCS_TIMEOUT_SECONDS,
            )
        except ConfigValidationError as exc:
            logger.error("Provider configuration failed: %s", exc)
            raise HTTPException(
                status_code=503, detail=_validation_detail(exc)
            ) from exc
    return provider.resource(type_name)


def _state_response(resource: Resource, d: ResourceData, replaced: bool = False) -> dict:
    return {"type": resource.type_name, "id": d.id, "state": d.state(), "replaced": replaced}


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health Check",
    description="Liveness endpoint used by probes and orchestration.",
)
def health():
    return {"status": "ok", "configured": provider.configured}


@app.get(
    "/schema",
    response_model=SchemaResponse,
    tags=["system"],
    summary="Provider Schema",
    description="Provider and resource attribute schemas.",
)
def schema():
    return provider.describe()


@app.post(
    "/resources/{type_name}/validate",
    response_model=ValidateResponse,
    tags=["resources"],
    summary="Validate Resource Config",
    description="Static and cross-field validation; never calls the Binocs API.",
)
def validate_resource(type_name: str, req: ResourceConfigRequest):
    resource = _resource(type_name, configured=False)
    errors = resource.validate(req.config)
    return {
        "valid": not errors,
        "diagnostics": [DiagnosticResponse(**e.to_dict()) for e in errors],
    }


@app.post(
    "/resources/{type_name}",
    response_model=ResourceStateResponse,
    status_code=201,
    tags=["resources"],
    summary="Create Resource",
)
def create_resource(type_name: str, req: ResourceConfigRequest):
    resource = _resource(type_name)
    errors = resource.validate(req.config)
    if errors:
        raise HTTPException(status_code=422, detail=[e.to_dict() for e in errors])

    d = resource.new_data(config=req.config)
    try:
        resource.create(d)
    except ConfigValidationError as exc:
        raise HTTPException(status_code=422, detail=_validation_detail(exc)) from exc
    except ResourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _state_response(resource, d)


@app.get(
    "/resources/{type_name}/{ident}",
    response_model=ResourceStateResponse,
    tags=["resources"],
    summary="Read Resource",
    description="Returns 404 when the remote object no longer exists.",
)
def read_resource(type_name: str, ident: str):
    resource = _resource(type_name)
    d = resource.new_data(id=ident)
    try:
        found = resource.exists(d)
    except ResourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if not found:
        raise HTTPException(status_code=404, detail=f"{type_name} {ident} not found")
    return _state_response(resource, d)


@app.put(
    "/resources/{type_name}/{ident}",
    response_model=ResourceStateResponse,
    tags=["resources"],
    summary="Update Resource",
    description="Updates in place, or replaces the object when an immutable attribute changed.",
)
def update_resource(type_name: str, ident: str, req: ResourceUpdateRequest):
    resource = _resource(type_name)
    errors = resource.validate(req.config)
    if errors:
        raise HTTPException(status_code=422, detail=[e.to_dict() for e in errors])

    d = resource.new_data(config=req.config, state=req.prior_state, id=ident)
    replace = resource.requires_replacement(d)
    try:
        if replace:
            logger.info("Replacing %s %s; changed: %s", type_name, ident, ", ".join(replace))
            resource.delete(d)
            d = resource.new_data(config=req.config)
            try:
                resource.create(d)
            except ResourceError as exc:
                logger.error(
                    "Replacement of %s %s failed after the old object was removed: %s",
                    type_name,
                    ident,
                    exc,
                )
                raise HTTPException(
                    status_code=502,
                    detail=f"{exc} (previous {type_name} {ident} was already removed)",
                ) from exc
        else:
            resource.update(d)
    except ConfigValidationError as exc:
        raise HTTPException(status_code=422, detail=_validation_detail(exc)) from exc
    except ResourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _state_response(resource, d, replaced=bool(replace))


@app.delete(
    "/resources/{type_name}/{ident}",
    status_code=204,
    tags=["resources"],
    summary="Delete Resource",
)
def delete_resource(type_name: str, ident: str):
    resource = _resource(type_name)
    try:
        resource.delete(resource.new_data(id=ident))
    except ResourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.post(
    "/resources/{type_name}/import",
    response_model=ResourceStateResponse,
    tags=["resources"],
    summary="Import Resource",
    description="Adopts an existing remote object by its identifier.",
)
def import_resource(type_name: str, req: ImportRequest):
    resource = _resource(type_name)
    try:
        d = resource.import_state(req.id)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ResourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _state_response(resource, d)
