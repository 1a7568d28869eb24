from __future__ import annotations

from pathlib import Path

import pytest

from backend.app.world.store import CampaignStore, GeneratedElementSink, InMemoryCampaignStore


def test_store_satisfies_protocols(world_store):
    assert isinstance(world_store, CampaignStore)
    assert isinstance(world_store, GeneratedElementSink)


def test_find_campaign_projection(world_store):
    assert world_store.find_campaign("camp-1") == {
        "name": "Shattered Crown",
        "description": "A kingdom split by civil war.",
    }
    assert world_store.find_campaign("missing") is None


def test_find_element_returns_copy(world_store):
    element = world_store.find_element("tav-1")
    element["data"]["name"] = "Changed"
    assert world_store.find_element("tav-1")["data"]["name"] == "The Rusty Tankard"


def test_create_generated_element_ids_are_unique():
    store = InMemoryCampaignStore()
    first = store.create_generated_element("camp-1", "tav-1", "npc", {"name": "Grom"})
    second = store.create_generated_element("camp-1", "tav-1", "npc", {"name": "Mara"})
    assert first["id"].startswith("npc_")
    assert first["id"] != second["id"]
    assert first["parent_id"] == "tav-1"
    assert first["object_type"] == "npc"
    assert len(store.elements("camp-1")) == 2


def test_from_yaml_accepts_camel_case_keys(tmp_path):
    world = tmp_path / "world.yaml"
    world.write_text(
        "campaigns:\n"
        "  - id: c1\n"
        "    name: Ashfall\n"
        "elements:\n"
        "  - id: r1\n"
        "    type: region\n"
        "    campaignId: c1\n"
        "    data: {name: Emberlands}\n"
        "  - id: d1\n"
        "    type: dungeon\n"
        "    parentId: r1\n"
        "    data: {label: Cinder Vault}\n",
        encoding="utf-8",
    )
    store = InMemoryCampaignStore.from_yaml(world)
    assert store.find_campaign("c1")["name"] == "Ashfall"
    assert store.find_element("d1")["parent_id"] == "r1"
    assert store.find_element("r1")["campaign_id"] == "c1"


def test_from_yaml_rejects_non_mapping(tmp_path):
    world = tmp_path / "world.yaml"
    world.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        InMemoryCampaignStore.from_yaml(world)


def test_sample_world_file_loads():
    sample = Path(__file__).resolve().parents[2] / "data" / "world.example.yaml"
    store = InMemoryCampaignStore.from_yaml(sample)
    assert store.find_campaign("camp-1")["name"] == "Shattered Crown"
    assert store.find_element("tav-1")["parent_id"] == "city-1"
    assert store.find_element("ruins-1")["type"] == "ruins"
