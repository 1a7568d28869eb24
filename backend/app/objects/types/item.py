"""Item (equipment and treasure) object type."""
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

RARITIES = ("Common", "Uncommon", "Rare", "Very Rare", "Legendary", "Artifact")


class ItemValue(PayloadModel):
    amount: Optional[Number] = Field(None, ge=0)
    currency: Optional[str] = None


class ItemCharges(PayloadModel):
    current: Optional[Number] = Field(None, ge=0)
    maximum: Optional[Number] = Field(None, ge=0)
    recharge: Optional[str] = None


class ItemMechanics(PayloadModel):
    armor_class: Optional[Number] = None
    damage: Optional[str] = None
    attack_bonus: Optional[Number] = None
    damage_bonus: Optional[Number] = None
    saving_throw_dc: Optional[Number] = Field(None, alias="savingThrowDC")
    range: Optional[str] = None


class ItemAbility(PayloadModel):
    name: str
    description: str
    usage: Optional[str] = None


class Crafting(PayloadModel):
    skill: Optional[str] = None
    dc: Optional[Number] = None
    time: Optional[str] = None
    cost: Optional[str] = None
    components: Optional[List[str]] = None


class Curse(PayloadModel):
    name: Optional[str] = None
    description: Optional[str] = None
    removal_method: Optional[str] = None


class ItemPayload(PayloadModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: Optional[str] = None  # weapon, armor, tool, consumable, treasure, ...
    category: Optional[str] = None
    rarity: Optional[Literal["Common", "Uncommon", "Rare", "Very Rare", "Legendary", "Artifact"]] = None
    value: Optional[ItemValue] = None
    weight: Optional[Number] = Field(None, ge=0)
    properties: Optional[List[str]] = None
    magical: Optional[bool] = None
    attunement: Optional[bool] = None
    charges: Optional[ItemCharges] = None
    mechanics: Optional[ItemMechanics] = None
    abilities: Optional[List[ItemAbility]] = None
    history: Optional[str] = None
    creator: Optional[str] = None
    materials: Optional[List[str]] = None
    crafting: Optional[Crafting] = None
    quest_hooks: Optional[List[str]] = None
    curse: Optional[Curse] = None


ITEM = TypeDefinition(
    name="item",
    display_name="Item",
    plural_name="Items",
    icon="package",
    category="item",
    prompt_template="item_generation.txt",
    schema=ObjectSchema(ItemPayload),
    context_builder="hierarchy",
    display_fields=(
        DisplayField("name", "Name", "text", 1),
        DisplayField("type", "Type", "badge", 2),
        DisplayField("rarity", "Rarity", "badge", 3),
        DisplayField("description", "Description", "text", 4),
        DisplayField("value", "Value", "text", 5, condition=lambda d: bool((d.get("value") or {}).get("amount"))),
        DisplayField("properties", "Properties", "list", 6, condition=lambda d: bool(d.get("properties"))),
        DisplayField("abilities", "Abilities", "list", 7, condition=lambda d: bool(d.get("abilities"))),
        DisplayField("mechanics", "Mechanics", "text", 8, condition=lambda d: bool(d.get("mechanics"))),
        DisplayField("materials", "Materials", "list", 9, condition=lambda d: bool(d.get("materials"))),
        DisplayField("curse", "Curse", "text", 10, condition=lambda d: bool((d.get("curse") or {}).get("name"))),
    ),
    editable_fields=(
        EditableField("name", "Name", "text", required=True),
        EditableField("description", "Description", "textarea", required=True),
        EditableField("type", "Item Type", "text"),
        EditableField("category", "Category", "text"),
        EditableField("rarity", "Rarity", "select", options=RARITIES),
        EditableField("magical", "Magical", "text"),
        EditableField("attunement", "Requires Attunement", "text"),
        EditableField("properties", "Properties", "list"),
        EditableField("history", "History", "textarea"),
        EditableField("materials", "Materials", "list"),
        EditableField("questHooks", "Quest Hooks", "list"),
    ),
    default_data={
        "name": "New Item",
        "description": "A new item awaiting details.",
        "rarity": "Common",
        "magical": False,
        "attunement": False,
        "weight": 0,
        "properties": [],
        "abilities": [],
        "materials": [],
        "questHooks": [],
        "value": {"amount": 0, "currency": "gp"},
        "charges": {},
        "mechanics": {},
        "crafting": {},
        "curse": {},
    },
    permissions=PermissionConfig(),
)
