"""Shared configuration constants used by the backend and the CLI."""
from __future__ import annotations

import os
from pathlib import Path

# Project root: resolve relative to this file's location
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Prompt templates live in prompts/<version>/<name>.txt
PROMPT_VERSION = os.environ.get("REALMSMITH_PROMPT_VERSION", "v1").strip() or "v1"
PROMPTS_DIR = os.environ.get("REALMSMITH_PROMPTS_DIR", str(_PROJECT_ROOT / "prompts" / PROMPT_VERSION))
