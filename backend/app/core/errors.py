"""Errors raised by the object-generation pipeline (outside the LLM layer)."""
from __future__ import annotations


class RegistryError(Exception):
    """Raised when an object type definition fails structural validation."""


class ObjectTypeError(Exception):
    """Raised when an unknown object type is requested."""

    def __init__(self, object_type: str, message: str | None = None):
        self.object_type = object_type
        super().__init__(message or f"Object type '{object_type}' not found in registry")


class ValidationError(Exception):
    """Raised when an LLM payload cannot be extracted, parsed or schema-validated."""

    def __init__(self, object_type: str, reason: str, violations: list[str] | None = None):
        self.object_type = object_type
        self.reason = reason
        self.violations = list(violations or [])
        super().__init__(f"Invalid {object_type} data: {reason}")


class TemplateNotFoundError(Exception):
    """Raised when a named prompt template has no backing file."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(f"Prompt template not found: {name} ({path})")


class PersistenceError(Exception):
    """Raised when the generated element could not be stored."""

    def __init__(self, object_type: str, reason: str):
        self.object_type = object_type
        self.reason = reason
        super().__init__(f"Failed to persist generated {object_type}: {reason}")
