"""Minimal smoke tests for the realmsmith CLI wrapper.

Run with: python -m pytest tests/test_cli.py -v
"""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

# No provider is configured in the child process, whatever the host env holds
_CLEAN_ENV = {
    k: v
    for k, v in os.environ.items()
    if not (k.startswith("ENABLE_") or k.endswith("_API_KEY") or k.startswith("REALMSMITH_"))
}


def _run_cli(*args: str, timeout: int = 60) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "realmsmith", *args],
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=str(ROOT),
        env=_CLEAN_ENV,
    )


class TestCLIHelp:
    """Verify that all subcommands register and print help without errors."""

    def test_main_help(self):
        result = _run_cli("--help")
        assert result.returncode == 0
        for command in ("types", "providers", "test-providers", "generate", "serve"):
            assert command in result.stdout

    def test_generate_help(self):
        result = _run_cli("generate", "--help")
        assert result.returncode == 0
        assert "--world" in result.stdout
        assert "--campaign" in result.stdout
        assert "--provider" in result.stdout

    def test_serve_help(self):
        result = _run_cli("serve", "--help")
        assert result.returncode == 0
        assert "--port" in result.stdout


class TestReadOnlyCommands:
    def test_types_lists_builtin_types(self):
        result = _run_cli("types")
        assert result.returncode == 0
        assert "npc: NPC / NPCs [character] context=social" in result.stdout
        assert "location: 1" in result.stdout

    def test_types_json(self):
        result = _run_cli("types", "--json")
        assert result.returncode == 0
        names = [t["name"] for t in json.loads(result.stdout)]
        assert names == ["character", "npc", "monster", "area", "item"]

    def test_providers_without_keys(self):
        result = _run_cli("providers")
        assert result.returncode == 0
        assert "gemini: model=gemini-1.5-flash enabled=False available=False" in result.stdout
        assert "No live providers" in result.stdout

    def test_test_providers_without_keys(self):
        result = _run_cli("test-providers")
        assert result.returncode == 1
        assert "No live providers" in result.stdout


class TestGenerateGuardrails:
    def test_generate_missing_world_file(self):
        result = _run_cli("generate", "npc", "an innkeeper", "--world", "/nonexistent/world.yaml", "--campaign", "c1")
        assert result.returncode == 1
        assert "not found" in result.stdout.lower()

    def test_generate_without_providers_fails_cleanly(self, tmp_path):
        world = tmp_path / "world.yaml"
        world.write_text("campaigns:\n  - id: c1\n    name: Ashfall\n", encoding="utf-8")
        result = _run_cli("generate", "npc", "an innkeeper", "--world", str(world), "--campaign", "c1")
        assert result.returncode == 1
        assert "No LLM providers are available" in result.stdout

    def test_generate_unknown_type(self, tmp_path):
        world = tmp_path / "world.yaml"
        world.write_text("campaigns: []\n", encoding="utf-8")
        result = _run_cli("generate", "dragon", "x", "--world", str(world), "--campaign", "c1")
        assert result.returncode == 1
        assert "Known types: character, npc, monster, area, item" in result.stdout
