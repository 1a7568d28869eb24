"""Object type definitions, schema descriptors and the generated-object envelope."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


# JSON numbers: ints stay ints, fractions stay floats
Number = Union[int, float]


class PayloadModel(BaseModel):
    """Base for generated payload schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass(frozen=True)
class SchemaResult:
    """Outcome of ``ObjectSchema.validate``: either ``data`` or ``violations``."""

    ok: bool
    data: Optional[Dict[str, Any]] = None
    violations: tuple[str, ...] = ()


def _format_violation(error: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{loc}: {error.get('msg', 'invalid value')}"


class ObjectSchema:
    """Schema descriptor for one object type, backed by a pydantic model.

    ``validate`` never raises on bad input; it reports every violation at once.
    Valid payloads come back canonical: aliased keys, defaults applied and
    unset optionals omitted.
    """

    def __init__(self, model: Type[BaseModel]):
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    def validate(self, value: Any) -> SchemaResult:
        try:
            instance = self.model.model_validate(value)
        except PydanticValidationError as exc:
            return SchemaResult(ok=False, violations=tuple(_format_violation(e) for e in exc.errors()))
        return SchemaResult(
            ok=True,
            data=instance.model_dump(by_alias=True, exclude_none=True, mode="json"),
        )

    def json_schema(self) -> dict[str, Any]:
        return self.model.model_json_schema(by_alias=True)

    def __repr__(self) -> str:
        return f"ObjectSchema({self.name})"


@dataclass(frozen=True)
class DisplayField:
    key: str
    label: str
    type: str  # text|badge|stats|list|custom
    priority: int
    condition: Optional[Callable[[Dict[str, Any]], bool]] = None

    def is_visible(self, data: Dict[str, Any]) -> bool:
        if self.condition is None:
            return True
        return bool(self.condition(data))


@dataclass(frozen=True)
class EditableField:
    key: str
    label: str
    type: str  # text|textarea|number|select|list
    required: bool = False
    options: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class PermissionConfig:
    can_create: bool = True
    can_edit: bool = True
    can_delete: bool = True
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class TypeDefinition:
    """Immutable description of one generatable object kind.

    ``context_builder`` names the context policy (hierarchy, social or combat);
    the builder itself is created per request with the caller's store.
    """

    name: str
    display_name: str
    plural_name: str
    prompt_template: str
    schema: ObjectSchema
    context_builder: str
    category: str
    display_fields: tuple[DisplayField, ...] = ()
    editable_fields: tuple[EditableField, ...] = ()
    default_data: Dict[str, Any] = field(default_factory=dict)
    icon: Optional[str] = None
    permissions: PermissionConfig = field(default_factory=PermissionConfig)

    def ordered_display_fields(self) -> list[DisplayField]:
        return sorted(self.display_fields, key=lambda f: f.priority)

    def visible_display_fields(self, data: Dict[str, Any]) -> list[DisplayField]:
        return [f for f in self.ordered_display_fields() if f.is_visible(data)]

    def summary(self) -> dict[str, Any]:
        """JSON-ready description for listings (no callables)."""
        return {
            "name": self.name,
            "displayName": self.display_name,
            "pluralName": self.plural_name,
            "icon": self.icon,
            "category": self.category,
            "promptTemplate": self.prompt_template,
            "contextBuilder": self.context_builder,
            "displayFields": [
                {
                    "key": f.key,
                    "label": f.label,
                    "type": f.type,
                    "priority": f.priority,
                    "conditional": f.condition is not None,
                }
                for f in self.ordered_display_fields()
            ],
            "editableFields": [
                {
                    "key": f.key,
                    "label": f.label,
                    "type": f.type,
                    "required": f.required,
                    **({"options": list(f.options)} if f.options is not None else {}),
                }
                for f in self.editable_fields
            ],
            "defaultData": dict(self.default_data),
            "permissions": {
                "canCreate": self.permissions.can_create,
                "canEdit": self.permissions.can_edit,
                "canDelete": self.permissions.can_delete,
                "roles": list(self.permissions.roles),
            },
        }


class GenerationMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    provider: str
    model: str
    tokens_used: int
    cost_estimate: float
    latency_ms: int
    timestamp: datetime
    prompt_version: Optional[str] = None


class GeneratedObject(BaseModel):
    """Envelope returned for one successful generation. Immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    object_type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    metadata: GenerationMetadata

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


__all__ = [
    "DisplayField",
    "EditableField",
    "GeneratedObject",
    "GenerationMetadata",
    "Number",
    "ObjectSchema",
    "PayloadModel",
    "PermissionConfig",
    "SchemaResult",
    "TypeDefinition",
]
