"""Centralized tuning constants shared across the app."""
from __future__ import annotations

# Token estimation when a provider does not report usage.
# Approximate and provider-inconsistent; see DESIGN.md.
TOKEN_ESTIMATE_CHARS_PER_TOKEN = 4

# Usage log retention (most recent N metrics, oldest evicted first)
USAGE_LOG_CAPACITY = 1000

# Provider self-test
PROVIDER_TEST_PROMPT = 'Test prompt: say "hello"'
PROVIDER_TEST_MAX_TOKENS = 10

# Registry closed sets
OBJECT_CATEGORIES: tuple[str, ...] = ("character", "location", "item", "lore")
DISPLAY_FIELD_TYPES: tuple[str, ...] = ("text", "badge", "stats", "list", "custom")
EDITABLE_FIELD_TYPES: tuple[str, ...] = ("text", "textarea", "number", "select", "list")
CONTEXT_POLICIES: tuple[str, ...] = ("hierarchy", "social", "combat")

# Context assembly: only the outermost levels of the ancestor chain are mapped
# to named fields (region, city, area); deeper levels are walked but not surfaced.
CONTEXT_MAPPED_LEVELS = 3

# Area types considered dangerous by the combat context policy
DANGEROUS_AREA_TYPES: frozenset[str] = frozenset({"dungeon", "cave", "wilderness", "ruins"})
