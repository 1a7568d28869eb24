"""
FastAPI endpoints for object generation, type metadata and provider diagnostics.
Thin controller over ObjectGenerationService; maps pipeline errors to status codes.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.core.error_handling import create_error_response
from backend.app.core.errors import (
    ObjectTypeError,
    PersistenceError,
    TemplateNotFoundError,
    ValidationError,
)
from backend.app.generation.service import ObjectGenerationService
from backend.app.llm.errors import (
    ContentFiltered,
    ContextLengthExceeded,
    LLMError,
    NoProvidersAvailable,
    RateLimitError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


class GenerateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    prompt: str = Field(min_length=1)
    campaign_id: str
    context_id: Optional[str] = None
    provider: Optional[str] = None
    timeout_ms: Optional[int] = Field(None, gt=0)

    @field_validator("campaign_id", "context_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # Numeric ids from JSON clients are accepted as strings
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


def get_service(request: Request) -> ObjectGenerationService:
    return request.app.state.service


@router.post("/generate/{object_type}", status_code=status.HTTP_201_CREATED)
def generate_object(
    object_type: str,
    body: GenerateRequest,
    service: ObjectGenerationService = Depends(get_service),
):
    """Generate one object of ``object_type`` and persist it under ``contextId``."""
    if not service.is_valid_object_type(object_type):
        raise ObjectTypeError(object_type)
    generated = service.generate_object(
        object_type,
        body.prompt,
        body.context_id,
        body.campaign_id,
        provider=body.provider,
        timeout_ms=body.timeout_ms,
    )
    return generated.to_api()


@router.get("/object-types")
def list_object_types(service: ObjectGenerationService = Depends(get_service)):
    types = []
    for name in service.list_object_types():
        summary = service.get_object_type_definition(name).summary()
        types.append(summary)
    return {"types": types, "stats": service.registry.stats_by_category()}


@router.get("/object-types/{name}")
def get_object_type(name: str, service: ObjectGenerationService = Depends(get_service)):
    definition = service.get_object_type_definition(name)
    return {**definition.summary(), "schema": definition.schema.json_schema()}


@router.get("/providers")
def list_providers(service: ObjectGenerationService = Depends(get_service)):
    gateway = service.gateway
    return {
        "defaultProvider": gateway.config.default_provider,
        "providers": [p.model_dump() for p in gateway.list_providers()],
    }


@router.get("/usage-stats")
def usage_stats(service: ObjectGenerationService = Depends(get_service)):
    return service.gateway.get_usage_stats().model_dump(by_alias=True)


@router.get("/test-providers")
def test_providers(service: ObjectGenerationService = Depends(get_service)):
    results = service.gateway.test_all_providers()
    return {name: result.model_dump() for name, result in results.items()}


@router.get("/health")
def health(service: ObjectGenerationService = Depends(get_service)):
    return {
        "status": "healthy",
        "registryInitialized": service.registry.is_initialized(),
        "objectTypes": len(service.registry),
        "liveProviders": service.gateway.live_providers,
    }


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def error_status(exc: Exception) -> int:
    """HTTP status for a pipeline error."""
    if isinstance(exc, ObjectTypeError):
        return 404
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, RateLimitError):
        return 429
    if isinstance(exc, NoProvidersAvailable):
        return 503
    if isinstance(exc, ContextLengthExceeded):
        return 400
    if isinstance(exc, ContentFiltered):
        return 422
    if isinstance(exc, LLMError):
        return 502
    return 500


def error_code(exc: Exception) -> str:
    if isinstance(exc, LLMError):
        return exc.code
    if isinstance(exc, ObjectTypeError):
        return "OBJECT_TYPE_NOT_FOUND"
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR"
    if isinstance(exc, PersistenceError):
        return "PERSISTENCE_ERROR"
    if isinstance(exc, TemplateNotFoundError):
        return "TEMPLATE_NOT_FOUND"
    return "INTERNAL_ERROR"


def _details(exc: Exception) -> dict[str, Any]:
    details: dict[str, Any] = {"exception_type": type(exc).__name__}
    if isinstance(exc, LLMError):
        details["provider"] = exc.provider
    if isinstance(exc, (ObjectTypeError, ValidationError, PersistenceError)):
        details["object_type"] = exc.object_type
    if isinstance(exc, ValidationError) and exc.violations:
        details["violations"] = exc.violations
    return details


async def pipeline_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, status_code, exc)

    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitError) and exc.retry_after is not None:
        headers["Retry-After"] = str(max(0, math.ceil(exc.retry_after)))
    body = create_error_response(
        error_code=error_code(exc),
        message=str(exc),
        node=getattr(exc, "provider", None) or "api",
        details=_details(exc),
        retryable=exc.retryable if isinstance(exc, LLMError) else None,
    )
    return JSONResponse(status_code=status_code, content=body, headers=headers or None)


def install_error_handlers(app: FastAPI) -> None:
    for exc_type in (ObjectTypeError, ValidationError, LLMError, PersistenceError, TemplateNotFoundError):
        app.add_exception_handler(exc_type, pipeline_error_handler)
