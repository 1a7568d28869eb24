"""GenerationContext: the flat set of named fields a prompt template renders against."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass
class GenerationContext:
    """Per-request context. Built fresh for each generation, never persisted.

    Known fields map to ``UPPER_SNAKE`` template variables; policy-specific keys
    (SOCIAL_SETTING, THREAT_LEVEL, ...) live in ``extras`` under their template names.
    """

    object_type: str = ""
    user_prompt: str = ""
    campaign_name: str | None = None
    campaign_description: str | None = None
    region_name: str | None = None
    region_description: str | None = None
    city_name: str | None = None
    city_description: str | None = None
    area_name: str | None = None
    area_description: str | None = None
    area_type: str | None = None
    extras: dict[str, str] = field(default_factory=dict)

    def with_request(self, user_prompt: str, object_type: str) -> "GenerationContext":
        """Overlay the caller's prompt and object type; the overlay always wins."""
        self.user_prompt = user_prompt
        self.object_type = object_type
        self.extras.pop("USER_PROMPT", None)
        self.extras.pop("OBJECT_TYPE", None)
        return self

    def to_template_vars(self) -> dict[str, Any]:
        """Flatten to template variables, omitting unset (None) fields."""
        out: dict[str, Any] = dict(self.extras)
        for f in fields(self):
            if f.name == "extras":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name.upper()] = value
        return out
