"""``realmsmith providers``: show effective provider configuration and availability."""
from __future__ import annotations

from backend.app.config import load_llm_config
from backend.app.llm.gateway import LLMGateway


def register(subparsers) -> None:
    p = subparsers.add_parser("providers", help="Show effective LLM provider config and availability")
    p.set_defaults(func=run)


def run(args) -> int:
    config = load_llm_config()
    gateway = LLMGateway(config)
    try:
        print(f"Effective LLM provider config (default={config.default_provider}):")
        print()
        for status in gateway.list_providers():
            settings = config.get(status.name)
            line = (
                f"- {status.name}: model={status.model} enabled={status.enabled} "
                f"available={status.available}"
            )
            if settings is not None:
                line += f" timeout_ms={settings.timeout_ms} max_tokens={settings.max_tokens}"
            print(line)
        if not gateway.live_providers:
            print("\nNo live providers: set an API key and ENABLE_<PROVIDER>=true.")
    finally:
        gateway.close()

    print("\nOverride pattern:")
    print("  ENABLE_<PROVIDER>, REALMSMITH_<PROVIDER>_MODEL, REALMSMITH_<PROVIDER>_BASE_URL")
    print("Example (OpenAI as default):")
    print("  DEFAULT_LLM_PROVIDER=openai")
    print("  ENABLE_OPENAI=true")
    print("  OPENAI_API_KEY=<your-key>")
    return 0
