"""Preflight helpers shared by the CLI commands."""
from __future__ import annotations

import os
import re
import socket
from pathlib import Path
from typing import Mapping

from shared.runtime_settings import load_runtime_settings

# KEY=VALUE, optionally prefixed with ``export`` as in shell-sourced files
_DOTENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")


class AppRunnerError(RuntimeError):
    """Raised for launcher/preflight failures."""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def load_dotenv(dotenv_path: Path) -> list[str]:
    """Apply ``.env`` pairs to the process env without overriding the shell.

    Returns the keys that were actually set.
    """
    if not dotenv_path.exists():
        return []

    applied: list[str] = []
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        m = _DOTENV_LINE.match(line)
        if not m:
            continue
        key, value = m.group(1), _unquote(m.group(2).strip())
        if key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    return applied


def resolve_world_file(raw: str | None) -> Path | None:
    """Existing world YAML path, None when not given; raises when it is missing."""
    if not raw:
        return None
    path = Path(raw).expanduser()
    if not path.is_file():
        raise AppRunnerError(f"World file not found at {path}")
    return path.resolve()


def is_port_available(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def ensure_prod_env_safety(environ: Mapping[str, str] | None = None) -> None:
    """Outside dev mode the API needs an explicit, non-wildcard CORS allowlist."""
    settings = load_runtime_settings(environ)
    if settings.dev_mode:
        return
    if not settings.cors_explicit:
        raise AppRunnerError("Production mode requires explicit REALMSMITH_CORS_ALLOW_ORIGINS")
    if settings.allows_any_origin:
        raise AppRunnerError("Production mode forbids wildcard CORS; set explicit REALMSMITH_CORS_ALLOW_ORIGINS")
