"""Non-player character object type (social focus)."""
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


class NPCRelationship(PayloadModel):
    name: str
    relationship: str
    attitude: Literal["friendly", "neutral", "hostile", "unknown"]


class SocialStats(PayloadModel):
    influence: Number = Field(5, ge=1, le=10)
    wealth: Number = Field(5, ge=1, le=10)
    knowledge: Number = Field(5, ge=1, le=10)
    charisma: Number = Field(5, ge=1, le=10)


class NPCDialogue(PayloadModel):
    greeting: Optional[str] = None
    catchphrase: Optional[str] = None
    speech_pattern: Optional[str] = None


class NPCPayload(PayloadModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    background: Optional[str] = None
    occupation: Optional[str] = None
    personality: Optional[str] = None
    motivations: Optional[List[str]] = None
    relationships: Optional[List[NPCRelationship]] = None
    secrets: Optional[List[str]] = None
    social_stats: Optional[SocialStats] = None
    dialogue: Optional[NPCDialogue] = None
    location: Optional[str] = None
    availability: Optional[str] = None
    quest_hooks: Optional[List[str]] = None


NPC = TypeDefinition(
    name="npc",
    display_name="NPC",
    plural_name="NPCs",
    icon="users",
    category="character",
    prompt_template="npc_generation.txt",
    schema=ObjectSchema(NPCPayload),
    context_builder="social",
    display_fields=(
        DisplayField("name", "Name", "text", 1),
        DisplayField("occupation", "Occupation", "badge", 2),
        DisplayField("description", "Description", "text", 3),
        DisplayField("socialStats", "Social Stats", "stats", 4),
        DisplayField("motivations", "Motivations", "list", 5, condition=lambda d: bool(d.get("motivations"))),
        DisplayField("relationships", "Relationships", "list", 6, condition=lambda d: bool(d.get("relationships"))),
        DisplayField(
            "dialogue.greeting",
            "Greeting",
            "text",
            7,
            condition=lambda d: bool((d.get("dialogue") or {}).get("greeting")),
        ),
        DisplayField("location", "Location", "badge", 8, condition=lambda d: bool(d.get("location"))),
    ),
    editable_fields=(
        EditableField("name", "Name", "text", required=True),
        EditableField("description", "Description", "textarea", required=True),
        EditableField("occupation", "Occupation", "text"),
        EditableField("background", "Background", "textarea"),
        EditableField("personality", "Personality", "textarea"),
        EditableField("motivations", "Motivations", "list"),
        EditableField("location", "Location", "text"),
        EditableField("availability", "Availability", "text"),
        EditableField("questHooks", "Quest Hooks", "list"),
    ),
    default_data={
        "name": "New NPC",
        "description": "A new NPC awaiting details.",
        "socialStats": {"influence": 5, "wealth": 5, "knowledge": 5, "charisma": 5},
        "relationships": [],
        "motivations": [],
        "secrets": [],
        "questHooks": [],
        "dialogue": {},
    },
    permissions=PermissionConfig(),
)
