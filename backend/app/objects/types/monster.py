"""Monster object type (combat focus)."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from backend.app.objects.models import (
    DisplayField,
    EditableField,
    Number,
    ObjectSchema,
    PayloadModel,
    PermissionConfig,
    TypeDefinition,
)

MONSTER_SIZES = ("Tiny", "Small", "Medium", "Large", "Huge", "Gargantuan")
MonsterSize = Literal["Tiny", "Small", "Medium", "Large", "Huge", "Gargantuan"]


class MonsterSpeed(PayloadModel):
    walk: Optional[Number] = None
    fly: Optional[Number] = None
    swim: Optional[Number] = None
    climb: Optional[Number] = None


class AbilityScores(PayloadModel):
    strength: Number = Field(10, ge=1, le=30)
    dexterity: Number = Field(10, ge=1, le=30)
    constitution: Number = Field(10, ge=1, le=30)
    intelligence: Number = Field(10, ge=1, le=30)
    wisdom: Number = Field(10, ge=1, le=30)
    charisma: Number = Field(10, ge=1, le=30)


class SpecialAbility(PayloadModel):
    name: str
    description: str


class MonsterAction(PayloadModel):
    name: str
    description: str
    attack_bonus: Optional[Number] = None
    damage: Optional[str] = None


class LegendaryAction(PayloadModel):
    name: str
    description: str
    cost: Optional[Number] = None


class MonsterPayload(PayloadModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: Optional[str] = None  # beast, humanoid, undead, ...
    size: Optional[MonsterSize] = None
    alignment: Optional[str] = None
    armor_class: Optional[Number] = Field(None, ge=1, le=30)
    hit_points: Optional[Number] = Field(None, ge=1, le=1000)
    speed: Optional[MonsterSpeed] = None
    abilities: Optional[AbilityScores] = None
    saving_throws: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    damage_resistances: Optional[List[str]] = None
    damage_immunities: Optional[List[str]] = None
    condition_immunities: Optional[List[str]] = None
    senses: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    challenge_rating: Optional[str] = None  # "1/4", "2", ...
    proficiency_bonus: Optional[Number] = Field(None, ge=1, le=10)
    special_abilities: Optional[List[SpecialAbility]] = None
    actions: Optional[List[MonsterAction]] = None
    legendary_actions: Optional[List[LegendaryAction]] = None
    tactics: Optional[str] = None
    habitat: Optional[str] = None
    loot: Optional[List[str]] = None


MONSTER = TypeDefinition(
    name="monster",
    display_name="Monster",
    plural_name="Monsters",
    icon="skull",
    category="character",
    prompt_template="monster_generation.txt",
    schema=ObjectSchema(MonsterPayload),
    context_builder="combat",
    display_fields=(
        DisplayField("name", "Name", "text", 1),
        DisplayField("type", "Type", "badge", 2),
        DisplayField("size", "Size", "badge", 3),
        DisplayField("challengeRating", "CR", "badge", 4),
        DisplayField("description", "Description", "text", 5),
        DisplayField("abilities", "Abilities", "stats", 6),
        DisplayField("armorClass", "AC", "text", 7),
        DisplayField("hitPoints", "HP", "text", 8),
        DisplayField(
            "specialAbilities", "Special Abilities", "list", 9,
            condition=lambda d: bool(d.get("specialAbilities")),
        ),
        DisplayField("actions", "Actions", "list", 10, condition=lambda d: bool(d.get("actions"))),
    ),
    editable_fields=(
        EditableField("name", "Name", "text", required=True),
        EditableField("description", "Description", "textarea", required=True),
        EditableField("type", "Creature Type", "text"),
        EditableField("size", "Size", "select", options=MONSTER_SIZES),
        EditableField("alignment", "Alignment", "text"),
        EditableField("challengeRating", "Challenge Rating", "text"),
        EditableField("armorClass", "Armor Class", "number"),
        EditableField("hitPoints", "Hit Points", "number"),
        EditableField("tactics", "Combat Tactics", "textarea"),
        EditableField("habitat", "Habitat", "text"),
        EditableField("loot", "Potential Loot", "list"),
    ),
    default_data={
        "name": "New Monster",
        "description": "A new monster awaiting details.",
        "size": "Medium",
        "alignment": "Neutral",
        "abilities": {
            "strength": 10,
            "dexterity": 10,
            "constitution": 10,
            "intelligence": 10,
            "wisdom": 10,
            "charisma": 10,
        },
        "speed": {"walk": 30},
        "armorClass": 10,
        "hitPoints": 10,
        "challengeRating": "1/4",
        "proficiencyBonus": 2,
        "specialAbilities": [],
        "actions": [],
        "legendaryActions": [],
        "savingThrows": [],
        "skills": [],
        "damageResistances": [],
        "damageImmunities": [],
        "conditionImmunities": [],
        "senses": [],
        "languages": [],
        "loot": [],
    },
    permissions=PermissionConfig(),
)
