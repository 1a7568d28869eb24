"""Campaign/element store interfaces and an in-memory implementation.

The generation pipeline reads campaigns and elements through ``CampaignStore``
and writes generated objects through ``GeneratedElementSink``. Real deployments
plug their database in behind these protocols; ``InMemoryCampaignStore`` backs
the CLI, the dev server and the tests, optionally seeded from a YAML world file.
"""
from __future__ import annotations

import copy
import logging
import threading
import time
from pathlib import Path
from typing import Any, Mapping, Protocol, runtime_checkable

import yaml

logger = logging.getLogger(__name__)


@runtime_checkable
class CampaignStore(Protocol):
    def find_campaign(self, campaign_id: str) -> dict[str, Any] | None:
        """Return ``{name, description}`` or None."""
        ...

    def find_element(self, element_id: str) -> dict[str, Any] | None:
        """Return ``{id, parent_id, type, data}`` or None."""
        ...


@runtime_checkable
class GeneratedElementSink(Protocol):
    def create_generated_element(
        self,
        campaign_id: str,
        parent_id: str | None,
        object_type: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """Persist a generated object as a new element; return it (at least ``id``)."""
        ...


def _str_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


class InMemoryCampaignStore:
    """Thread-safe dict-backed store implementing both protocols."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._campaigns: dict[str, dict[str, Any]] = {}
        self._elements: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_campaign(self, campaign_id: str, name: str, description: str | None = None) -> dict[str, Any]:
        campaign = {"id": str(campaign_id), "name": name, "description": description}
        with self._lock:
            self._campaigns[str(campaign_id)] = campaign
        return dict(campaign)

    def add_element(
        self,
        element_id: str,
        type: str,
        data: Mapping[str, Any] | None = None,
        parent_id: str | None = None,
        campaign_id: str | None = None,
    ) -> dict[str, Any]:
        element = {
            "id": str(element_id),
            "campaign_id": _str_id(campaign_id),
            "parent_id": _str_id(parent_id),
            "type": type,
            "object_type": None,
            "data": copy.deepcopy(dict(data or {})),
        }
        with self._lock:
            self._elements[str(element_id)] = element
        return copy.deepcopy(element)

    @classmethod
    def from_mapping(cls, world: Mapping[str, Any]) -> "InMemoryCampaignStore":
        """Build a store from ``{campaigns: [...], elements: [...]}``.

        Element keys accept snake_case or camelCase (``parent_id``/``parentId``).
        """
        store = cls()
        for c in world.get("campaigns") or []:
            store.add_campaign(c["id"], c.get("name") or "", c.get("description"))
        for e in world.get("elements") or []:
            store.add_element(
                e["id"],
                e.get("type") or "unknown",
                e.get("data") or {},
                parent_id=e.get("parent_id", e.get("parentId")),
                campaign_id=e.get("campaign_id", e.get("campaignId")),
            )
        logger.info(
            "World loaded: %d campaigns, %d elements", len(store._campaigns), len(store._elements)
        )
        return store

    @classmethod
    def from_yaml(cls, path: str | Path) -> "InMemoryCampaignStore":
        p = Path(path)
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"World file must contain a mapping: {p}")
        return cls.from_mapping(data)

    # ------------------------------------------------------------------
    # CampaignStore
    # ------------------------------------------------------------------

    def find_campaign(self, campaign_id: str) -> dict[str, Any] | None:
        with self._lock:
            campaign = self._campaigns.get(str(campaign_id))
        if campaign is None:
            return None
        return {"name": campaign["name"], "description": campaign.get("description")}

    def find_element(self, element_id: str) -> dict[str, Any] | None:
        with self._lock:
            element = self._elements.get(str(element_id))
            return copy.deepcopy(element) if element is not None else None

    # ------------------------------------------------------------------
    # GeneratedElementSink
    # ------------------------------------------------------------------

    def create_generated_element(
        self,
        campaign_id: str,
        parent_id: str | None,
        object_type: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        with self._lock:
            element_id = self._next_id(object_type)
            element = {
                "id": element_id,
                "campaign_id": _str_id(campaign_id),
                "parent_id": _str_id(parent_id),
                "type": object_type,
                "object_type": object_type,
                "data": copy.deepcopy(data),
            }
            self._elements[element_id] = element
        logger.info("Stored generated %s as %s (parent=%s)", object_type, element_id, parent_id)
        return copy.deepcopy(element)

    def _next_id(self, object_type: str) -> str:
        # <type>_<epoch ms>, suffixed when two land in the same millisecond
        base = f"{object_type}_{int(time.time() * 1000)}"
        candidate = base
        n = 2
        while candidate in self._elements:
            candidate = f"{base}_{n}"
            n += 1
        return candidate

    def elements(self, campaign_id: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            items = [
                copy.deepcopy(e)
                for e in self._elements.values()
                if campaign_id is None or e.get("campaign_id") == str(campaign_id)
            ]
        return items
