"""Structured error logging and API error bodies for the generation pipeline."""
from __future__ import annotations

import logging
from typing import Any

from backend.app.core.errors import ObjectTypeError, ValidationError
from backend.app.llm.errors import LLMError

logger = logging.getLogger(__name__)

# Attributes pipeline/LLM exceptions carry that are worth surfacing in logs
_ERROR_ATTRS = ("provider", "object_type", "code", "retryable")

# Failures with their own taxonomy; logged without a traceback
_EXPECTED_ERRORS = (LLMError, ObjectTypeError, ValidationError)


def error_context(error: Exception, **fields: Any) -> dict[str, Any]:
    """Merge explicit ``fields`` with the context the exception itself carries.

    Explicit values win; ``None`` values are dropped.
    """
    context: dict[str, Any] = {}
    for attr in _ERROR_ATTRS:
        value = getattr(error, attr, None)
        if value is not None:
            context[attr] = value
    context.update({k: v for k, v in fields.items() if v is not None})
    return context


def log_error_with_context(
    error: Exception,
    stage: str,
    campaign_id: str | None = None,
    object_type: str | None = None,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """
    Log a pipeline failure with the stage it happened in and whatever context is known.

    Args:
        error: The exception that occurred
        stage: Pipeline stage ('context', 'llm', 'validate', 'persist' or 'api')
        campaign_id: Campaign the object was generated for
        object_type: Object type being generated
        extra_context: Additional fields attached to the log record
    """
    context = error_context(error, campaign_id=campaign_id, object_type=object_type)
    summary = ", ".join(f"{k}={v}" for k, v in context.items()) or "no context"
    extra = {**(extra_context or {}), **context, "stage": stage}
    logger.error(
        "[%s] %s: %s (%s)",
        stage,
        type(error).__name__,
        error,
        summary,
        exc_info=not isinstance(error, _EXPECTED_ERRORS),
        extra=extra,
    )


def create_error_response(
    error_code: str,
    message: str,
    node: str | None = None,
    details: dict[str, Any] | None = None,
    retryable: bool | None = None,
) -> dict[str, Any]:
    """Structured error body for API responses.

    ``node`` is the provider or pipeline stage that failed; ``retryable`` is only
    present for LLM errors, where the caller may try again later.
    """
    optional = {"node": node or None, "retryable": retryable, "details": details or None}
    return {
        "error_code": error_code,
        "message": message,
        **{k: v for k, v in optional.items() if v is not None},
    }
