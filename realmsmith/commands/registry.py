"""Subcommand wiring for the realmsmith CLI.

Each module under ``realmsmith/commands`` exposes ``register(subparsers)``;
this list fixes the order they appear in ``--help``.
"""
from __future__ import annotations

from importlib import import_module
from types import ModuleType

COMMAND_MODULES: tuple[str, ...] = (
    "object_types",
    "providers",
    "provider_check",
    "generate",
    "serve",
)


def load_command_module(name: str) -> ModuleType:
    module = import_module(f"realmsmith.commands.{name}")
    if not callable(getattr(module, "register", None)):
        raise TypeError(f"realmsmith.commands.{name} does not define register(subparsers)")
    return module


def register_all(subparsers) -> list[str]:
    """Register every command module; returns the subcommand names added, in order."""
    added: list[str] = []
    for name in COMMAND_MODULES:
        before = set(subparsers.choices)
        load_command_module(name).register(subparsers)
        added.extend(c for c in subparsers.choices if c not in before)
    return added
