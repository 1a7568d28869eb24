"""App config: per-provider LLM settings with env overrides.

Provider settings are read once at process start. Per-provider env overrides:
ENABLE_{PROVIDER}, REALMSMITH_{PROVIDER}_MODEL, REALMSMITH_{PROVIDER}_BASE_URL,
REALMSMITH_{PROVIDER}_TIMEOUT_MS, REALMSMITH_{PROVIDER}_MAX_TOKENS.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from shared.runtime_settings import env_flag, env_int

logger = logging.getLogger(__name__)

# Fixed enumeration order used for fallback selection and status listings.
PROVIDER_ORDER: tuple[str, ...] = ("gemini", "openai", "claude", "groq", "grok")

GLOBAL_MAX_TOKENS = 4096
DEFAULT_TIMEOUT_MS = 30000


@dataclass(frozen=True)
class ProviderSettings:
    """Static configuration for one LLM provider."""

    name: str
    model: str
    max_tokens: int = 2048
    temperature: float = 0.7
    enabled: bool = False
    cost_per_1k_tokens: float = 0.0
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    api_key: str = field(default="", repr=False)
    base_url: str = ""


@dataclass(frozen=True)
class LLMConfig:
    default_provider: str
    providers: dict[str, ProviderSettings]
    global_max_tokens: int = GLOBAL_MAX_TOKENS
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def get(self, name: str) -> ProviderSettings | None:
        return self.providers.get(name)

    def is_enabled(self, name: str) -> bool:
        settings = self.providers.get(name)
        return settings is not None and settings.enabled

    def enabled_providers(self) -> list[str]:
        """Enabled provider names, in the fixed enumeration order."""
        return [name for name in PROVIDER_ORDER if self.is_enabled(name)]


# name -> (default model, cost per 1k tokens in USD, api key env var, default base url, default timeout ms)
_PROVIDER_DEFAULTS: dict[str, tuple[str, float, str, str, int]] = {
    "gemini": ("gemini-1.5-flash", 0.075, "GOOGLE_API_KEY", "https://generativelanguage.googleapis.com", 30000),
    "openai": ("gpt-4o-mini", 0.15, "OPENAI_API_KEY", "https://api.openai.com", 30000),
    "claude": ("claude-3-haiku-20240307", 0.25, "ANTHROPIC_API_KEY", "https://api.anthropic.com", 30000),
    # Groq is fast; a shorter timeout surfaces stalls sooner
    "groq": ("llama3-8b-8192", 0.0, "GROQ_API_KEY", "https://api.groq.com/openai", 15000),
    "grok": ("grok-beta", 0.5, "GROK_API_KEY", "https://api.x.ai", 30000),
}


def _provider_env(key: str, provider: str, environ: Mapping[str, str]) -> str:
    return environ.get(f"REALMSMITH_{provider.upper()}_{key}", "").strip()


def _temperature(provider: str, environ: Mapping[str, str]) -> float:
    raw = _provider_env("TEMPERATURE", provider, environ)
    if not raw:
        return 0.7
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid temperature %r for %s", raw, provider)
        return 0.7


def _provider_settings(name: str, environ: Mapping[str, str]) -> ProviderSettings:
    model, cost, key_var, base_url, timeout_ms = _PROVIDER_DEFAULTS[name]
    prefix = f"REALMSMITH_{name.upper()}_"
    return ProviderSettings(
        name=name,
        model=_provider_env("MODEL", name, environ) or model,
        max_tokens=env_int(f"{prefix}MAX_TOKENS", 2048, environ=environ),
        temperature=_temperature(name, environ),
        enabled=env_flag(f"ENABLE_{name.upper()}", default=False, environ=environ),
        cost_per_1k_tokens=cost,
        timeout_ms=env_int(f"{prefix}TIMEOUT_MS", timeout_ms, environ=environ),
        api_key=environ.get(key_var, "").strip(),
        base_url=(_provider_env("BASE_URL", name, environ) or base_url).rstrip("/"),
    )


def load_llm_config(environ: Mapping[str, str] | None = None) -> LLMConfig:
    """Build the LLM configuration from the environment (or an explicit mapping)."""
    env = os.environ if environ is None else environ
    config = LLMConfig(
        default_provider=env.get("DEFAULT_LLM_PROVIDER", "").strip().lower() or "gemini",
        providers={name: _provider_settings(name, env) for name in PROVIDER_ORDER},
        timeout_ms=env_int("REALMSMITH_LLM_TIMEOUT_MS", DEFAULT_TIMEOUT_MS, environ=env),
    )
    _log_resolved_llm_config(config)
    return config


def _log_resolved_llm_config(config: LLMConfig) -> None:
    """Log resolved provider config (no secrets)."""
    lines = [f"LLM config (default={config.default_provider}):"]
    for name in PROVIDER_ORDER:
        s = config.providers[name]
        lines.append(
            f"  {name}: model={s.model} enabled={s.enabled} "
            f"key={'set' if s.api_key else 'missing'} timeout_ms={s.timeout_ms}"
        )
    logger.info("\n".join(lines))
