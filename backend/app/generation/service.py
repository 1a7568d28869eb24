"""Generation orchestrator: context -> prompt -> LLM -> validate -> persist.

Each step depends on the previous one succeeding and nothing is retried here.
Errors propagate unchanged, except persistence failures which are wrapped in
PersistenceError so callers can tell them apart from generation failures.
"""
from __future__ import annotations

import logging
from typing import Any

from backend.app.context.builders import create_context_builder
from backend.app.context.models import GenerationContext
from backend.app.core.error_handling import log_error_with_context
from backend.app.core.errors import PersistenceError, ValidationError
from backend.app.generation.validator import ResponseValidator
from backend.app.llm.errors import LLMError
from backend.app.llm.gateway import LLMGateway
from backend.app.llm.types import utc_now
from backend.app.objects.models import GeneratedObject, GenerationMetadata, TypeDefinition
from backend.app.objects.registry import ObjectTypeRegistry
from backend.app.prompts.registry import PromptTemplateEngine
from backend.app.world.store import CampaignStore, GeneratedElementSink

logger = logging.getLogger(__name__)


class ObjectGenerationService:
    def __init__(
        self,
        registry: ObjectTypeRegistry,
        gateway: LLMGateway,
        store: CampaignStore,
        sink: GeneratedElementSink | None = None,
        templates: PromptTemplateEngine | None = None,
        validator: ResponseValidator | None = None,
    ):
        self.registry = registry
        self.gateway = gateway
        self.store = store
        self.sink = sink if sink is not None else store
        self.templates = templates or PromptTemplateEngine()
        self.validator = validator or ResponseValidator(registry)

    def generate_object(
        self,
        object_type: str,
        prompt: str,
        context_id: str | None,
        campaign_id: str,
        provider: str | None = None,
        timeout_ms: int | None = None,
    ) -> GeneratedObject:
        """Run one generation. ``timeout_ms`` bounds both the ancestor walk and the provider call."""
        definition = self.registry.get(object_type)
        logger.info("Generating %s (context=%s, campaign=%s)", object_type, context_id, campaign_id)

        context = self._build_context(definition, context_id, campaign_id, timeout_ms).with_request(prompt, object_type)
        full_prompt = self.templates.render(definition.prompt_template, context.to_template_vars())
        prompt_version = self.templates.template_version_id(definition.prompt_template)
        logger.debug("Assembled %s prompt (%s):\n%s", object_type, prompt_version, full_prompt)

        try:
            response = self.gateway.generate(full_prompt, provider=provider, timeout_ms=timeout_ms)
        except LLMError as exc:
            log_error_with_context(
                exc, "llm", campaign_id, object_type, {"requested_provider": provider, "code": exc.code}
            )
            raise
        logger.info(
            "LLM response for %s: %s (%s) tokens=%d cost=$%.4f time=%dms",
            object_type,
            response.provider,
            response.model,
            response.tokens_used,
            response.cost_estimate,
            response.latency_ms,
        )

        try:
            data = self.validator.validate(object_type, response.content)
        except ValidationError as exc:
            log_error_with_context(
                exc, "validate", campaign_id, object_type, {"violations": exc.violations[:10]}
            )
            raise

        element = self._persist(object_type, data, context_id, campaign_id)
        return GeneratedObject(
            id=str(element["id"]),
            object_type=object_type,
            data=data,
            metadata=GenerationMetadata(
                provider=response.provider,
                model=response.model,
                tokens_used=response.tokens_used,
                cost_estimate=response.cost_estimate,
                latency_ms=response.latency_ms,
                timestamp=utc_now(),
                prompt_version=prompt_version,
            ),
        )

    def _persist(
        self, object_type: str, data: dict[str, Any], context_id: str | None, campaign_id: str
    ) -> dict[str, Any]:
        try:
            element = self.sink.create_generated_element(campaign_id, context_id, object_type, data)
        except Exception as exc:
            log_error_with_context(exc, "persist", campaign_id, object_type, {"parent_id": context_id})
            raise PersistenceError(object_type, str(exc) or type(exc).__name__) from exc
        if not element or not element.get("id"):
            raise PersistenceError(object_type, "store returned no element id")
        return element

    def _build_context(
        self,
        definition: TypeDefinition,
        context_id: str | None,
        campaign_id: str | None,
        timeout_ms: int | None = None,
    ) -> GenerationContext:
        builder = create_context_builder(definition.context_builder, self.store, budget_ms=timeout_ms)
        return builder.build(context_id, campaign_id, definition.name)

    # ------------------------------------------------------------------
    # Read accessors for controllers
    # ------------------------------------------------------------------

    def build_context(self, object_type: str, context_id: str | None, campaign_id: str | None) -> GenerationContext:
        return self._build_context(self.registry.get(object_type), context_id, campaign_id)

    def validate_object_data(self, object_type: str, raw: str) -> dict[str, Any]:
        return self.validator.validate(object_type, raw)

    def list_object_types(self) -> list[str]:
        return self.registry.list_names()

    def get_object_type_definition(self, name: str) -> TypeDefinition:
        return self.registry.get(name)

    def is_valid_object_type(self, name: str) -> bool:
        return self.registry.is_valid_type(name)
