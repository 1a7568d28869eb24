"""Object type registry: registration invariants, lookups and built-in types."""
from __future__ import annotations

import dataclasses
import logging

import pytest

from backend.app.core.errors import ObjectTypeError, RegistryError
from backend.app.objects.models import DisplayField, EditableField
from backend.app.objects.registry import (
    ObjectTypeRegistry,
    register_builtin_types,
    validate_definition,
)
from backend.app.objects.types import BUILTIN_TYPES, NPC


def _npc_variant(**changes):
    return dataclasses.replace(NPC, **changes)


# ---------------------------------------------------------------------------
# Built-in types
# ---------------------------------------------------------------------------


def test_default_registry_has_builtin_types(registry):
    assert registry.list_names() == ["character", "npc", "monster", "area", "item"]
    assert registry.is_initialized()
    assert len(registry) == 5
    assert "npc" in registry


def test_stats_by_category(registry):
    stats = registry.stats_by_category()
    assert stats["total_types"] == 5
    assert stats["by_category"] == {"character": 3, "location": 1, "item": 1}


def test_get_by_category(registry):
    names = [d.name for d in registry.get_by_category("character")]
    assert names == ["character", "npc", "monster"]
    assert registry.get_by_category("lore") == []


@pytest.mark.parametrize("definition", BUILTIN_TYPES, ids=lambda d: d.name)
def test_builtin_default_data_satisfies_schema(definition):
    result = definition.schema.validate(definition.default_data)
    assert result.ok, result.violations


def test_builtin_context_policies():
    policies = {d.name: d.context_builder for d in BUILTIN_TYPES}
    assert policies == {
        "character": "hierarchy",
        "npc": "social",
        "monster": "combat",
        "area": "hierarchy",
        "item": "hierarchy",
    }


def test_get_unknown_type_raises_object_type_error(registry):
    with pytest.raises(ObjectTypeError) as exc_info:
        registry.get("dragon")
    assert exc_info.value.object_type == "dragon"
    assert registry.is_valid_type("dragon") is False


# ---------------------------------------------------------------------------
# Registration invariants
# ---------------------------------------------------------------------------


def test_register_rejects_unknown_category():
    reg = ObjectTypeRegistry()
    with pytest.raises(RegistryError, match="Failed to register object type 'npc': Invalid category 'weapon'"):
        reg.register(_npc_variant(category="weapon"))
    assert len(reg) == 0


def test_register_rejects_unknown_context_policy():
    with pytest.raises(RegistryError, match="Invalid context builder"):
        ObjectTypeRegistry().register(_npc_variant(context_builder="gossip"))


def test_register_rejects_blank_name():
    with pytest.raises(RegistryError, match="valid name"):
        ObjectTypeRegistry().register(_npc_variant(name="  "))


def test_register_rejects_missing_template():
    with pytest.raises(RegistryError, match="prompt_template"):
        ObjectTypeRegistry().register(_npc_variant(prompt_template=""))


def test_register_rejects_missing_schema():
    with pytest.raises(RegistryError, match="schema"):
        ObjectTypeRegistry().register(_npc_variant(schema=None))


def test_register_rejects_bad_display_field_type():
    fields = (DisplayField("name", "Name", "marquee", 1),)
    with pytest.raises(RegistryError, match="Invalid display field type 'marquee' at index 0"):
        ObjectTypeRegistry().register(_npc_variant(display_fields=fields))


def test_register_rejects_non_int_priority():
    fields = (DisplayField("name", "Name", "text", "first"),)
    with pytest.raises(RegistryError, match="priority must be a number"):
        ObjectTypeRegistry().register(_npc_variant(display_fields=fields))


def test_register_rejects_bool_priority():
    with pytest.raises(ValueError, match="priority must be a number"):
        validate_definition(_npc_variant(display_fields=(DisplayField("name", "Name", "text", True),)))


def test_register_rejects_select_without_options():
    fields = (EditableField("mood", "Mood", "select"),)
    with pytest.raises(RegistryError, match="Select field at index 0 must have options"):
        ObjectTypeRegistry().register(_npc_variant(editable_fields=fields))


def test_register_accepts_select_with_options():
    fields = (EditableField("mood", "Mood", "select", options=("calm", "angry")),)
    reg = ObjectTypeRegistry()
    reg.register(_npc_variant(editable_fields=fields))
    assert reg.get("npc").editable_fields[0].options == ("calm", "angry")


def test_register_rejects_default_data_violating_schema():
    with pytest.raises(RegistryError, match="default_data does not satisfy schema"):
        ObjectTypeRegistry().register(_npc_variant(default_data={"name": ""}))


def test_register_same_name_overwrites_with_warning(caplog):
    reg = ObjectTypeRegistry()
    reg.register(NPC)
    renamed = _npc_variant(display_name="Townsfolk")
    with caplog.at_level(logging.WARNING):
        reg.register(renamed)
    assert reg.get("npc").display_name == "Townsfolk"
    assert len(reg) == 1
    assert any("Overwriting" in r.message for r in caplog.records)


def test_register_builtin_types_wraps_failures():
    with pytest.raises(RegistryError, match="Auto-registration failed"):
        register_builtin_types(ObjectTypeRegistry(), [NPC, _npc_variant(name="bad", category="weapon")])


def test_clear_resets_initialized(registry):
    registry.clear()
    assert len(registry) == 0
    assert registry.is_initialized() is False


# ---------------------------------------------------------------------------
# Definition helpers
# ---------------------------------------------------------------------------


def test_visible_display_fields_respects_conditions():
    data = {"name": "Grom", "description": "x", "motivations": ["coin"]}
    keys = [f.key for f in NPC.visible_display_fields(data)]
    assert keys[:3] == ["name", "occupation", "description"]
    assert "motivations" in keys
    assert "relationships" not in keys
    assert "dialogue.greeting" not in keys


def test_summary_is_camel_case_and_json_ready():
    summary = NPC.summary()
    assert summary["displayName"] == "NPC"
    assert summary["contextBuilder"] == "social"
    assert summary["displayFields"][0] == {
        "key": "name",
        "label": "Name",
        "type": "text",
        "priority": 1,
        "conditional": False,
    }
    assert summary["permissions"]["canCreate"] is True
