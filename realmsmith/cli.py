"""Realmsmith unified CLI dispatcher.

All subcommands live in ``realmsmith/commands/*.py`` and expose a
``register(subparsers)`` function that adds themselves to argparse.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from realmsmith.commands.registry import register_all
from realmsmith.runtime.app_runner import load_dotenv


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="realmsmith",
        description="Realmsmith: LLM game-object generation CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command")
    register_all(sub)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    load_dotenv(Path.cwd() / ".env")

    # Each command stores a ``func`` on the namespace
    rc = args.func(args)
    sys.exit(rc or 0)
