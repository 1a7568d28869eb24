"""``realmsmith generate``: generate one object against a campaign world file."""
from __future__ import annotations

import json

from backend.app.core.errors import ObjectTypeError, PersistenceError, ValidationError
from backend.app.generation.factory import build_generation_service, build_store
from backend.app.llm.errors import LLMError
from realmsmith.runtime.app_runner import AppRunnerError, resolve_world_file


def register(subparsers) -> None:
    p = subparsers.add_parser("generate", help="Generate a game object with the configured LLM")
    p.add_argument("object_type", help="Registered object type (e.g. npc, monster)")
    p.add_argument("prompt", help="Free-text request for the object")
    p.add_argument("--world", type=str, required=True, help="World YAML file (campaigns + elements)")
    p.add_argument("--campaign", type=str, required=True, help="Campaign id")
    p.add_argument("--context", type=str, default=None, help="Parent element id to generate under")
    p.add_argument("--provider", type=str, default=None, help="Preferred provider (falls back to default)")
    p.add_argument("--json", action="store_true", help="Print the full generated object as JSON")
    p.set_defaults(func=run)


def run(args) -> int:
    try:
        world = resolve_world_file(args.world)
    except AppRunnerError as exc:
        print(f"  ERROR: {exc}")
        return 1

    service = build_generation_service(store=build_store(str(world)))
    try:
        generated = service.generate_object(
            args.object_type,
            args.prompt,
            args.context,
            args.campaign,
            provider=args.provider,
        )
    except ObjectTypeError as exc:
        print(f"  ERROR: {exc}")
        print(f"         Known types: {', '.join(service.list_object_types())}")
        return 1
    except ValidationError as exc:
        print(f"  ERROR: {exc}")
        for violation in exc.violations:
            print(f"         - {violation}")
        return 1
    except (LLMError, PersistenceError) as exc:
        print(f"  ERROR: {exc}")
        return 1
    finally:
        service.gateway.close()

    if args.json:
        print(json.dumps(generated.to_api(), indent=2))
        return 0

    meta = generated.metadata
    print(f"Created {generated.object_type} {generated.id}: {generated.data.get('name', '')}")
    print(
        f"  via {meta.provider} ({meta.model}) tokens={meta.tokens_used} "
        f"cost=${meta.cost_estimate:.4f} time={meta.latency_ms}ms prompt={meta.prompt_version}"
    )
    return 0
