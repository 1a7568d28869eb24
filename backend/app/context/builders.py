"""Context builders: reconstruct the ancestor chain of a target element.

Three policies share one base. The hierarchy policy maps the chain onto
region/city/area fields; social and combat layer a classification of the
deepest element on top. Context building never aborts a generation: lookup
failures are logged and whatever was assembled so far is returned. An optional
``budget_ms`` bounds the ancestor walk; when it runs out the hierarchy is
dropped and generation continues with campaign fields only.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from backend.app.constants import CONTEXT_MAPPED_LEVELS, DANGEROUS_AREA_TYPES
from backend.app.context.models import GenerationContext
from backend.app.world.store import CampaignStore

logger = logging.getLogger(__name__)

# element type -> (SOCIAL_SETTING, SOCIAL_ATMOSPHERE)
SOCIAL_SETTINGS: dict[str, tuple[str, str]] = {
    "tavern": ("tavern", "lively, social gathering place"),
    "inn": ("tavern", "lively, social gathering place"),
    "shop": ("commercial", "business-focused, transactional"),
    "market": ("commercial", "business-focused, transactional"),
    "temple": ("religious", "reverent, spiritual"),
    "shrine": ("religious", "reverent, spiritual"),
    "palace": ("noble", "formal, hierarchical"),
    "castle": ("noble", "formal, hierarchical"),
}
DEFAULT_SOCIAL_SETTING = ("general", "varied social interactions")

# element type -> (COMBAT_ENVIRONMENT, TACTICAL_CONSIDERATIONS)
COMBAT_ENVIRONMENTS: dict[str, tuple[str, str]] = {
    "dungeon": ("underground", "confined spaces, limited visibility"),
    "cave": ("underground", "confined spaces, limited visibility"),
    "forest": ("wilderness", "natural cover, varied terrain"),
    "wilderness": ("wilderness", "natural cover, varied terrain"),
    "city": ("urban", "buildings, civilians, guards"),
    "town": ("urban", "buildings, civilians, guards"),
    "castle": ("fortified", "defensive positions, choke points"),
    "fortress": ("fortified", "defensive positions, choke points"),
}
DEFAULT_COMBAT_ENVIRONMENT = ("general", "standard combat considerations")


@dataclass(frozen=True)
class HierarchyLevel:
    id: str
    name: str
    type: str
    description: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: dict[str, Any]) -> "HierarchyLevel":
        data = element.get("data") or {}
        return cls(
            id=str(element.get("id")),
            name=data.get("label") or data.get("name") or "Unknown",
            type=element.get("type") or "unknown",
            description=data.get("description") or "",
            data=data,
        )


class BaseContextBuilder:
    """Shared lookups. Subclasses add policy-specific enrichment in ``enrich``."""

    policy = "base"

    def __init__(
        self,
        store: CampaignStore,
        budget_ms: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.budget_ms = budget_ms
        self.clock = clock

    def build(self, context_id: str | None, campaign_id: str | None, object_type: str) -> GenerationContext:
        context = GenerationContext(object_type=object_type)
        try:
            self._apply_campaign(context, campaign_id)
            chain = self.element_hierarchy(context_id)
            self._apply_hierarchy(context, chain)
            if chain:
                self.enrich(context, chain[-1])
        except Exception as exc:
            logger.warning(
                "Error building %s context (context_id=%s, campaign_id=%s): %s",
                self.policy,
                context_id,
                campaign_id,
                exc,
                exc_info=True,
            )
        return context

    def enrich(self, context: GenerationContext, target: HierarchyLevel) -> None:
        """Policy hook: add fields derived from the deepest element."""

    def _apply_campaign(self, context: GenerationContext, campaign_id: str | None) -> None:
        if not campaign_id:
            return
        try:
            campaign = self.store.find_campaign(campaign_id)
        except Exception as exc:
            logger.warning("Error getting campaign info for %s: %s", campaign_id, exc, exc_info=True)
            return
        if campaign:
            context.campaign_name = campaign.get("name")
            context.campaign_description = campaign.get("description") or None

    def element_hierarchy(self, context_id: str | None) -> list[HierarchyLevel]:
        """Ancestor chain of ``context_id``, outermost first. Empty when unknown or on failure."""
        if not context_id:
            return []
        deadline = None if self.budget_ms is None else self.clock() + self.budget_ms / 1000
        try:
            element = self.store.find_element(context_id)
            chain: list[HierarchyLevel] = []
            seen: set[str] = set()
            while element:
                if deadline is not None and self.clock() > deadline:
                    logger.warning(
                        "Context budget of %dms exhausted walking ancestors of %s; dropping hierarchy",
                        self.budget_ms,
                        context_id,
                    )
                    return []
                level = HierarchyLevel.from_element(element)
                if level.id in seen:
                    logger.warning("Cycle in element parent chain at %s; stopping walk", level.id)
                    break
                seen.add(level.id)
                chain.insert(0, level)
                parent_id = element.get("parent_id")
                element = self.store.find_element(parent_id) if parent_id else None
            return chain
        except Exception as exc:
            logger.warning("Error building element hierarchy for %s: %s", context_id, exc, exc_info=True)
            return []

    @staticmethod
    def _apply_hierarchy(context: GenerationContext, chain: list[HierarchyLevel]) -> None:
        # Only the outermost levels are surfaced; deeper ones are walked but unmapped.
        for index, level in enumerate(chain[:CONTEXT_MAPPED_LEVELS]):
            if not level.name:
                continue
            if index == 0:
                context.region_name = level.name
                context.region_description = level.description
            elif index == 1:
                context.city_name = level.name
                context.city_description = level.description
            elif index == 2:
                context.area_name = level.name
                context.area_description = level.description
                context.area_type = level.type or None


class HierarchyContextBuilder(BaseContextBuilder):
    policy = "hierarchy"


class SocialContextBuilder(BaseContextBuilder):
    policy = "social"

    def enrich(self, context: GenerationContext, target: HierarchyLevel) -> None:
        setting, atmosphere = SOCIAL_SETTINGS.get(target.type, DEFAULT_SOCIAL_SETTING)
        context.extras["SOCIAL_SETTING"] = setting
        context.extras["SOCIAL_ATMOSPHERE"] = atmosphere


class CombatContextBuilder(BaseContextBuilder):
    policy = "combat"

    def enrich(self, context: GenerationContext, target: HierarchyLevel) -> None:
        environment, tactics = COMBAT_ENVIRONMENTS.get(target.type, DEFAULT_COMBAT_ENVIRONMENT)
        context.extras["COMBAT_ENVIRONMENT"] = environment
        context.extras["TACTICAL_CONSIDERATIONS"] = tactics
        context.extras["THREAT_LEVEL"] = "high" if target.type in DANGEROUS_AREA_TYPES else "moderate"


_BUILDERS: dict[str, type[BaseContextBuilder]] = {
    "hierarchy": HierarchyContextBuilder,
    "social": SocialContextBuilder,
    "combat": CombatContextBuilder,
}


def create_context_builder(
    policy: str, store: CampaignStore, budget_ms: int | None = None
) -> BaseContextBuilder:
    """Factory: context builder for a policy tag (hierarchy, social, combat)."""
    try:
        return _BUILDERS[policy](store, budget_ms=budget_ms)
    except KeyError:
        raise ValueError(
            f"Unknown context policy '{policy}'. Supported: {', '.join(_BUILDERS)}."
        ) from None
