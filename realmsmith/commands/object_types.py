"""``realmsmith types``: list registered object types and category stats."""
from __future__ import annotations

import json

from backend.app.objects.registry import build_default_registry


def register(subparsers) -> None:
    p = subparsers.add_parser("types", help="List registered object types")
    p.add_argument("--json", action="store_true", help="Print type summaries as JSON")
    p.set_defaults(func=run)


def run(args) -> int:
    registry = build_default_registry()
    definitions = registry.get_all()
    if args.json:
        print(json.dumps([d.summary() for d in definitions], indent=2))
        return 0

    stats = registry.stats_by_category()
    print(f"Registered object types ({stats['total_types']}):")
    print()
    for d in definitions:
        print(f"- {d.name}: {d.display_name} / {d.plural_name} [{d.category}] context={d.context_builder}")
    print("\nBy category:")
    for category, count in sorted(stats["by_category"].items()):
        print(f"  {category}: {count}")
    return 0
