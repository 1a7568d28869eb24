"""Player-character object type."""
from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field

from backend.app.objects.models import (
    DisplayField,
    EditableField,
    ObjectSchema,
    PayloadModel,
    PermissionConfig,
    TypeDefinition,
)

ALIGNMENTS = (
    "Lawful Good", "Neutral Good", "Chaotic Good",
    "Lawful Neutral", "True Neutral", "Chaotic Neutral",
    "Lawful Evil", "Neutral Evil", "Chaotic Evil",
)


class CharacterStats(PayloadModel):
    model_config = ConfigDict(extra="forbid")

    str_: Optional[int] = Field(None, alias="str", ge=1, le=20)
    dex: Optional[int] = Field(None, ge=1, le=20)
    con: Optional[int] = Field(None, ge=1, le=20)
    int_: Optional[int] = Field(None, alias="int", ge=1, le=20)
    wis: Optional[int] = Field(None, ge=1, le=20)
    cha: Optional[int] = Field(None, ge=1, le=20)
    level: Optional[int] = Field(None, ge=1, le=20)
    hp: Optional[int] = Field(None, ge=1)
    ac: Optional[int] = Field(None, ge=1)


class CharacterPayload(PayloadModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=10, max_length=2000)
    stats: Optional[CharacterStats] = None
    race: Optional[str] = Field(None, max_length=50)
    class_: Optional[str] = Field(None, alias="class", max_length=50)
    background: Optional[str] = Field(None, max_length=2000)
    alignment: Optional[str] = Field(None, max_length=50)
    equipment: Optional[List[str]] = None
    personality: Optional[str] = Field(None, max_length=500)


CHARACTER = TypeDefinition(
    name="character",
    display_name="Character",
    plural_name="Characters",
    icon="user",
    category="character",
    prompt_template="character_generation.txt",
    schema=ObjectSchema(CharacterPayload),
    context_builder="hierarchy",
    display_fields=(
        DisplayField("name", "Name", "text", 1),
        DisplayField("race", "Race", "badge", 2),
        DisplayField("class", "Class", "badge", 3),
        DisplayField("description", "Description", "text", 4),
        DisplayField("stats", "Stats", "stats", 5),
        DisplayField("personality", "Personality", "text", 6, condition=lambda d: bool(d.get("personality"))),
        DisplayField("equipment", "Equipment", "list", 7, condition=lambda d: bool(d.get("equipment"))),
    ),
    editable_fields=(
        EditableField("name", "Name", "text", required=True),
        EditableField("description", "Description", "textarea", required=True),
        EditableField("race", "Race", "text"),
        EditableField("class", "Class", "text"),
        EditableField("background", "Background", "text"),
        EditableField("alignment", "Alignment", "select", options=ALIGNMENTS),
        EditableField("personality", "Personality", "textarea"),
        EditableField("equipment", "Equipment", "list"),
    ),
    default_data={
        "name": "New Character",
        "description": "A new character awaiting details.",
        "stats": {"str": 10, "dex": 10, "con": 10, "int": 10, "wis": 10, "cha": 10},
        "equipment": [],
        "alignment": "True Neutral",
    },
    permissions=PermissionConfig(can_create=True, can_edit=True, can_delete=True),
)
