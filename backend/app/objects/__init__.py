"""Object type registry and built-in definitions."""
from backend.app.objects.models import (
    DisplayField,
    EditableField,
    GeneratedObject,
    GenerationMetadata,
    ObjectSchema,
    PayloadModel,
    PermissionConfig,
    SchemaResult,
    TypeDefinition,
)
from backend.app.objects.registry import (
    ObjectTypeRegistry,
    build_default_registry,
    register_builtin_types,
)

__all__ = [
    "DisplayField",
    "EditableField",
    "GeneratedObject",
    "GenerationMetadata",
    "ObjectSchema",
    "ObjectTypeRegistry",
    "PayloadModel",
    "PermissionConfig",
    "SchemaResult",
    "TypeDefinition",
    "build_default_registry",
    "register_builtin_types",
]
