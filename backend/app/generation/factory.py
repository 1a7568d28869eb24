"""Wire the generation pipeline from environment configuration."""
from __future__ import annotations

import logging
from typing import Mapping

from backend.app.config import load_llm_config
from backend.app.generation.service import ObjectGenerationService
from backend.app.llm.gateway import LLMGateway
from backend.app.llm.usage import UsageLog
from backend.app.objects.registry import build_default_registry
from backend.app.prompts.registry import PromptTemplateEngine
from backend.app.world.store import InMemoryCampaignStore
from shared.runtime_settings import load_runtime_settings

logger = logging.getLogger(__name__)


def build_store(world_file: str | None = None) -> InMemoryCampaignStore:
    if world_file:
        logger.info("Seeding campaign store from %s", world_file)
        return InMemoryCampaignStore.from_yaml(world_file)
    return InMemoryCampaignStore()


def build_generation_service(
    environ: Mapping[str, str] | None = None,
    store: InMemoryCampaignStore | None = None,
    world_file: str | None = None,
) -> ObjectGenerationService:
    """Registry + gateway + templates + store, configured from ``environ``."""
    settings = load_runtime_settings(environ)
    gateway = LLMGateway(load_llm_config(environ), usage_log=UsageLog(settings.usage_log_capacity))

    if store is None:
        store = build_store(world_file if world_file is not None else settings.world_file)
    return ObjectGenerationService(
        registry=build_default_registry(),
        gateway=gateway,
        store=store,
        templates=PromptTemplateEngine(settings.prompts_dir),
    )
