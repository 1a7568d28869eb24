"""``realmsmith serve``: start the FastAPI backend with uvicorn."""
from __future__ import annotations

import os

from realmsmith.runtime.app_runner import (
    AppRunnerError,
    ensure_prod_env_safety,
    is_port_available,
    resolve_world_file,
)


def register(subparsers) -> None:
    p = subparsers.add_parser("serve", help="Start the HTTP API (uvicorn)")
    p.add_argument("--host", type=str, default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    p.add_argument("--world", type=str, default=None, help="World YAML file to seed the campaign store")
    p.set_defaults(func=run)


def run(args) -> int:
    try:
        ensure_prod_env_safety()
        world = resolve_world_file(args.world)
    except AppRunnerError as exc:
        print(f"  ERROR: {exc}")
        return 1

    if not is_port_available(args.host, args.port):
        print(f"  ERROR: Port {args.port} is already in use on {args.host}")
        return 1

    if world is not None:
        os.environ["REALMSMITH_WORLD_FILE"] = str(world)

    import uvicorn

    print(f"  Starting Realmsmith API on http://{args.host}:{args.port}")
    uvicorn.run(
        "backend.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0
