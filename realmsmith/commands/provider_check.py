"""``realmsmith test-providers``: send a tiny prompt to every live provider."""
from __future__ import annotations

from backend.app.config import load_llm_config
from backend.app.llm.gateway import LLMGateway


def register(subparsers) -> None:
    p = subparsers.add_parser("test-providers", help="Probe every live LLM provider with a tiny prompt")
    p.set_defaults(func=run)


def run(args) -> int:
    gateway = LLMGateway(load_llm_config())
    try:
        results = gateway.test_all_providers()
    finally:
        gateway.close()

    if not results:
        print("  No live providers to test (no API keys configured)")
        return 1

    failed = 0
    for name, result in results.items():
        if result.available:
            print(f"  [OK]   {name}")
        else:
            failed += 1
            print(f"  [FAIL] {name}: {result.error}")
    return 1 if failed else 0
