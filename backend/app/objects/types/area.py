"""Area (location) object type."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from backend.app.objects.models import (
    DisplayField,
    EditableField,
    ObjectSchema,
    PayloadModel,
    PermissionConfig,
    TypeDefinition,
)

AREA_SIZES = ("Tiny", "Small", "Medium", "Large", "Vast")


class Inhabitant(PayloadModel):
    name: str
    type: str
    population: Optional[str] = None


class Landmark(PayloadModel):
    name: str
    description: str


class Danger(PayloadModel):
    name: str
    description: str
    severity: Optional[Literal["Minor", "Moderate", "Major", "Deadly"]] = None


class Connection(PayloadModel):
    name: str
    direction: str
    distance: Optional[str] = None
    travel_method: Optional[str] = None


class AreaEvent(PayloadModel):
    name: str
    description: str
    frequency: Optional[str] = None


class Economy(PayloadModel):
    primary_trade: Optional[str] = None
    wealth: Optional[Literal["Destitute", "Poor", "Modest", "Comfortable", "Wealthy", "Rich"]] = None
    currency: Optional[str] = None


class Government(PayloadModel):
    type: Optional[str] = None
    leader: Optional[str] = None
    laws: Optional[List[str]] = None


class Culture(PayloadModel):
    customs: Optional[List[str]] = None
    festivals: Optional[List[str]] = None
    beliefs: Optional[str] = None


class AreaPayload(PayloadModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: Optional[str] = None  # dungeon, city, wilderness, temple, ...
    size: Optional[Literal["Tiny", "Small", "Medium", "Large", "Vast"]] = None
    climate: Optional[str] = None
    terrain: Optional[List[str]] = None
    atmosphere: Optional[str] = None
    history: Optional[str] = None
    inhabitants: Optional[List[Inhabitant]] = None
    landmarks: Optional[List[Landmark]] = None
    resources: Optional[List[str]] = None
    dangers: Optional[List[Danger]] = None
    secrets: Optional[List[str]] = None
    connections: Optional[List[Connection]] = None
    events: Optional[List[AreaEvent]] = None
    economy: Optional[Economy] = None
    government: Optional[Government] = None
    culture: Optional[Culture] = None
    quest_hooks: Optional[List[str]] = None


def _has(key: str):
    return lambda d: bool(d.get(key))


AREA = TypeDefinition(
    name="area",
    display_name="Area",
    plural_name="Areas",
    icon="map",
    category="location",
    prompt_template="area_generation.txt",
    schema=ObjectSchema(AreaPayload),
    context_builder="hierarchy",
    display_fields=(
        DisplayField("name", "Name", "text", 1),
        DisplayField("type", "Type", "badge", 2),
        DisplayField("size", "Size", "badge", 3),
        DisplayField("description", "Description", "text", 4),
        DisplayField("atmosphere", "Atmosphere", "text", 5),
        DisplayField("inhabitants", "Inhabitants", "list", 6, condition=_has("inhabitants")),
        DisplayField("landmarks", "Landmarks", "list", 7, condition=_has("landmarks")),
        DisplayField("dangers", "Dangers", "list", 8, condition=_has("dangers")),
        DisplayField("resources", "Resources", "list", 9, condition=_has("resources")),
        DisplayField("connections", "Connections", "list", 10, condition=_has("connections")),
    ),
    editable_fields=(
        EditableField("name", "Name", "text", required=True),
        EditableField("description", "Description", "textarea", required=True),
        EditableField("type", "Location Type", "text"),
        EditableField("size", "Size", "select", options=AREA_SIZES),
        EditableField("climate", "Climate", "text"),
        EditableField("terrain", "Terrain Types", "list"),
        EditableField("atmosphere", "Atmosphere", "textarea"),
        EditableField("history", "History", "textarea"),
        EditableField("resources", "Resources", "list"),
        EditableField("questHooks", "Quest Hooks", "list"),
    ),
    default_data={
        "name": "New Area",
        "description": "A new area awaiting details.",
        "size": "Medium",
        "terrain": [],
        "inhabitants": [],
        "landmarks": [],
        "resources": [],
        "dangers": [],
        "secrets": [],
        "connections": [],
        "events": [],
        "questHooks": [],
        "economy": {},
        "government": {},
        "culture": {},
    },
    permissions=PermissionConfig(),
)
