"""Environment parsing shared by the API app, the CLI and the pipeline factory.

Every reader takes an optional ``environ`` mapping so tests can pass a plain
dict instead of patching ``os.environ``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from backend.app.constants import USAGE_LOG_CAPACITY

# Local frontends a developer is likely to run against the API
DEFAULT_DEV_CORS_ALLOW_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def env_str(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Stripped value of ``name``; None when unset or blank."""
    raw = _env(environ).get(name, "").strip()
    return raw or None


def env_flag(name: str, default: bool = False, environ: Mapping[str, str] | None = None) -> bool:
    """Boolean env value. Unrecognised words keep ``default``."""
    raw = (env_str(name, environ) or "").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def env_int(
    name: str,
    default: int,
    environ: Mapping[str, str] | None = None,
    minimum: int | None = None,
) -> int:
    """Int env value; blank or malformed values fall back to ``default``."""
    raw = env_str(name, environ)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None:
        value = max(value, minimum)
    return value


def parse_cors_allowlist(raw: str, fallback: tuple[str, ...] = DEFAULT_DEV_CORS_ALLOW_ORIGINS) -> list[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(fallback)


@dataclass(frozen=True)
class RuntimeSettings:
    """Process settings outside the per-provider LLM config (see ``backend.app.config``)."""

    dev_mode: bool
    cors_allow_origins: list[str]
    cors_explicit: bool
    world_file: str | None = None
    prompts_dir: str | None = None
    usage_log_capacity: int = USAGE_LOG_CAPACITY

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.cors_allow_origins


def load_runtime_settings(environ: Mapping[str, str] | None = None) -> RuntimeSettings:
    env = _env(environ)
    raw_cors = env_str("REALMSMITH_CORS_ALLOW_ORIGINS", env)
    return RuntimeSettings(
        dev_mode=env_flag("REALMSMITH_DEV_MODE", default=True, environ=env),
        cors_allow_origins=parse_cors_allowlist(raw_cors or ""),
        cors_explicit=bool(raw_cors and parse_cors_allowlist(raw_cors, fallback=())),
        world_file=env_str("REALMSMITH_WORLD_FILE", env),
        prompts_dir=env_str("REALMSMITH_PROMPTS_DIR", env),
        usage_log_capacity=env_int("REALMSMITH_USAGE_LOG_CAPACITY", USAGE_LOG_CAPACITY, environ=env, minimum=1),
    )
