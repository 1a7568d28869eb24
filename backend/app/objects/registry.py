"""Registry of object type definitions.

One explicit instance is built at startup and handed to the generation service
and the API; there is no module-level singleton. Writes happen at startup,
reads afterwards, all under one lock.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Iterable

from backend.app.constants import (
    CONTEXT_POLICIES,
    DISPLAY_FIELD_TYPES,
    EDITABLE_FIELD_TYPES,
    OBJECT_CATEGORIES,
)
from backend.app.core.errors import ObjectTypeError, RegistryError
from backend.app.objects.models import ObjectSchema, TypeDefinition

logger = logging.getLogger(__name__)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_definition(definition: TypeDefinition) -> None:
    """Raise ValueError describing the first structural problem in ``definition``."""
    if not _non_empty_str(definition.name):
        raise ValueError("Object type definition must have a valid name")
    if not _non_empty_str(definition.display_name):
        raise ValueError("Object type definition must have a valid display_name")
    if not _non_empty_str(definition.plural_name):
        raise ValueError("Object type definition must have a valid plural_name")

    if not _non_empty_str(definition.prompt_template):
        raise ValueError("Object type definition must have a valid prompt_template")
    if not isinstance(definition.schema, ObjectSchema):
        raise ValueError("Object type definition must have a schema")
    if definition.context_builder not in CONTEXT_POLICIES:
        raise ValueError(
            f"Invalid context builder '{definition.context_builder}'. "
            f"Must be one of: {', '.join(CONTEXT_POLICIES)}"
        )

    if definition.category not in OBJECT_CATEGORIES:
        raise ValueError(
            f"Invalid category '{definition.category}'. Must be one of: {', '.join(OBJECT_CATEGORIES)}"
        )

    for index, f in enumerate(definition.display_fields):
        if not f.key or not f.label or not f.type:
            raise ValueError(f"Display field at index {index} must have key, label, and type")
        if f.type not in DISPLAY_FIELD_TYPES:
            raise ValueError(f"Invalid display field type '{f.type}' at index {index}")
        # bool is an int subclass; a flag is not a priority
        if not isinstance(f.priority, int) or isinstance(f.priority, bool):
            raise ValueError(f"Display field priority must be a number at index {index}")

    for index, f in enumerate(definition.editable_fields):
        if not f.key or not f.label or not f.type:
            raise ValueError(f"Editable field at index {index} must have key, label, and type")
        if f.type not in EDITABLE_FIELD_TYPES:
            raise ValueError(f"Invalid editable field type '{f.type}' at index {index}")
        if f.type == "select" and not f.options:
            raise ValueError(f"Select field at index {index} must have options")

    if not isinstance(definition.default_data, dict):
        raise ValueError("Object type definition must have default_data mapping")
    result = definition.schema.validate(definition.default_data)
    if not result.ok:
        raise ValueError(f"default_data does not satisfy schema: {'; '.join(result.violations)}")


class ObjectTypeRegistry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._definitions: dict[str, TypeDefinition] = {}
        self._initialized = False

    def register(self, definition: TypeDefinition) -> None:
        name = getattr(definition, "name", None)
        try:
            validate_definition(definition)
        except (ValueError, AttributeError) as exc:
            raise RegistryError(f"Failed to register object type '{name}': {exc}") from exc

        with self._lock:
            if definition.name in self._definitions:
                logger.warning("Overwriting existing object type definition: %s", definition.name)
            self._definitions[definition.name] = definition
        logger.info("Registered object type: %s (%s)", definition.name, definition.display_name)

    def get(self, name: str) -> TypeDefinition:
        with self._lock:
            definition = self._definitions.get(name)
        if definition is None:
            raise ObjectTypeError(name)
        return definition

    def is_valid_type(self, name: str) -> bool:
        with self._lock:
            return name in self._definitions

    def list_names(self) -> list[str]:
        with self._lock:
            return list(self._definitions)

    def get_all(self) -> list[TypeDefinition]:
        with self._lock:
            return list(self._definitions.values())

    def get_by_category(self, category: str) -> list[TypeDefinition]:
        return [d for d in self.get_all() if d.category == category]

    def stats_by_category(self) -> dict[str, Any]:
        by_category: dict[str, int] = {}
        definitions = self.get_all()
        for d in definitions:
            by_category[d.category] = by_category.get(d.category, 0) + 1
        return {"total_types": len(definitions), "by_category": by_category}

    def mark_initialized(self) -> None:
        with self._lock:
            self._initialized = True
            count = len(self._definitions)
        logger.info("Object type registry initialized with %d types", count)

    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def clear(self) -> None:
        with self._lock:
            self._definitions.clear()
            self._initialized = False
        logger.info("Object type registry cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._definitions


def register_builtin_types(
    registry: ObjectTypeRegistry, definitions: Iterable[TypeDefinition] | None = None
) -> ObjectTypeRegistry:
    """Register the built-in object types and mark the registry initialized."""
    from backend.app.objects.types import BUILTIN_TYPES

    try:
        for definition in definitions if definitions is not None else BUILTIN_TYPES:
            registry.register(definition)
    except RegistryError as exc:
        logger.error("Failed to auto-register object types: %s", exc)
        raise RegistryError(f"Auto-registration failed: {exc}") from exc

    registry.mark_initialized()
    stats = registry.stats_by_category()
    logger.info(
        "Object registry ready: %d types, by category %s", stats["total_types"], stats["by_category"]
    )
    return registry


def build_default_registry() -> ObjectTypeRegistry:
    return register_builtin_types(ObjectTypeRegistry())
