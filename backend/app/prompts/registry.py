"""Versioned prompt templates: loading, rendering and hashing helpers.

Templates live in ``prompts/<version>/<name>.txt`` and use two constructs:
``{{FIELD}}`` substitution and non-nested ``{{#if FIELD}}...{{/if}}`` blocks.
"""
from __future__ import annotations

import hashlib
import logging
import re
import threading
from pathlib import Path
from typing import Any, Mapping

from backend.app.core.errors import TemplateNotFoundError
from shared.config import PROMPTS_DIR

logger = logging.getLogger(__name__)

_CONDITIONAL = re.compile(r"\{\{#if\s+(\w+)\}\}([\s\S]*?)\{\{/if\}\}")
_VARIABLE = re.compile(r"\{\{(\w+)\}\}")
_BLANK_RUN = re.compile(r"\n\s*\n\s*\n")


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Render ``template`` against ``variables``. Pure and deterministic.

    1. Resolve conditional blocks one at a time, re-scanning after each: the
       inner text is kept verbatim when the field is truthy, dropped otherwise.
    2. Replace ``{{FIELD}}`` with ``str(value)``; unknown tokens stay as-is.
    3. Collapse runs of blank lines to one, then trim.
    """
    processed = template
    while True:
        match = _CONDITIONAL.search(processed)
        if match is None:
            break
        keep = match.group(2) if variables.get(match.group(1)) else ""
        processed = processed[: match.start()] + keep + processed[match.end():]

    def _substitute(m: re.Match) -> str:
        value = variables.get(m.group(1))
        return m.group(0) if value is None else str(value)

    processed = _VARIABLE.sub(_substitute, processed)
    processed = _BLANK_RUN.sub("\n\n", processed)
    return processed.strip()


def prompt_hash(body: str) -> str:
    return hashlib.sha256(body.strip().encode("utf-8")).hexdigest()


class PromptTemplateEngine:
    """Read-through cache of template files. No automatic invalidation."""

    def __init__(self, template_dir: str | Path | None = None, version: str | None = None):
        self.template_dir = Path(template_dir or PROMPTS_DIR)
        self.version = version or self.template_dir.name
        self._cache: dict[str, str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _normalize(name: str) -> str:
        return name[:-4] if name.endswith(".txt") else name

    def _path(self, name: str) -> Path:
        return self.template_dir / f"{name}.txt"

    def load(self, name: str) -> str:
        key = self._normalize(name)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        path = self._path(key)
        if not path.is_file():
            raise TemplateNotFoundError(key, str(path))
        body = path.read_text(encoding="utf-8")
        with self._lock:
            # Racing loaders read the same file; first one wins
            body = self._cache.setdefault(key, body)
        logger.debug("Loaded prompt template %s from %s", key, path)
        return body

    def render(self, name: str, variables: Mapping[str, Any]) -> str:
        return render_template(self.load(name), variables)

    def template_version_id(self, name: str) -> str:
        """``<version>:<sha256[:12]>`` of the template body, for provenance."""
        return f"{self.version}:{prompt_hash(self.load(name))[:12]}"

    def available_templates(self) -> list[str]:
        if not self.template_dir.is_dir():
            return []
        return sorted(p.stem for p in self.template_dir.glob("*.txt"))

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
