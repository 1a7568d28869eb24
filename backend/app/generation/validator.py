"""Response validation: extract, parse and schema-check model output."""
from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from backend.app.core.errors import ValidationError
from backend.app.core.json_repair import extract_payload, strip_trailing_commas
from backend.app.objects.registry import ObjectTypeRegistry

logger = logging.getLogger(__name__)


def parse_structured(text: str) -> Any:
    """Parse ``text`` as JSON, falling back to YAML (a JSON superset).

    Raises ValueError when neither parser accepts it, including payloads nested
    too deeply for either parser.
    """
    try:
        return _parse_json_or_yaml(text)
    except RecursionError as exc:
        raise ValueError("payload is nested too deeply to parse") from exc


def _parse_json_or_yaml(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    repaired = strip_trailing_commas(text)
    if repaired != text:
        try:
            return json.loads(repaired)
        except json.JSONDecodeError:
            pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"not valid JSON or YAML: {exc}") from exc


class ResponseValidator:
    """All-or-nothing: returns the canonical payload or raises ValidationError."""

    def __init__(self, registry: ObjectTypeRegistry):
        self.registry = registry

    def parse(self, object_type: str, raw: str) -> Any:
        text = extract_payload(raw)
        logger.debug("Extracted payload for %s: %s", object_type, text[:500])
        try:
            return parse_structured(text)
        except ValueError as exc:
            raise ValidationError(object_type, f"could not parse response: {exc}") from exc

    def validate(self, object_type: str, raw: str) -> dict[str, Any]:
        definition = self.registry.get(object_type)
        parsed = self.parse(object_type, raw)
        result = definition.schema.validate(parsed)
        if not result.ok:
            raise ValidationError(object_type, "; ".join(result.violations), list(result.violations))
        return result.data or {}
