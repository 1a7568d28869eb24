"""Pytest setup: reset shared caches and provide a seeded campaign world."""
from __future__ import annotations

import json

import pytest

from backend.app.objects.registry import build_default_registry
from backend.app.world.store import InMemoryCampaignStore
from backend.tests.fakes import GROM, WORLD, FakeProvider
from shared.cache import clear_all_caches


def pytest_runtest_setup(item) -> None:
    clear_all_caches()


@pytest.fixture
def world_store() -> InMemoryCampaignStore:
    return InMemoryCampaignStore.from_mapping(WORLD)


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def grom_provider() -> FakeProvider:
    return FakeProvider("gemini", replies=[json.dumps(GROM)])
