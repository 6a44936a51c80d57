"""Shared pytest fixtures for the inix test suite.

Provides reusable fixtures for:
- A sample template source (config file + ``template/`` folder)
- A temporary template registry
- A scripted prompt engine that never touches the terminal
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from inix.config import Config
from inix.prompts import PromptEngine
from inix.registry import TemplateRegistry


# ---------------------------------------------------------------------------
# Template sources
# ---------------------------------------------------------------------------

@pytest.fixture
def template_source(tmp_path: Path) -> Path:
    """A local template: ``.meta.json`` with one question plus a file tree."""
    root = tmp_path / "local-template"
    files = root / "template"
    (files / "src").mkdir(parents=True)

    (root / ".meta.json").write_text(
        json.dumps({
            "questions": [
                {"name": "description", "type": "input", "message": "Description"},
            ]
        }),
        encoding="utf-8",
    )
    (files / "README.md").write_text(
        "# {{ projectName }}\n\n{{ description }}\n", encoding="utf-8"
    )
    (files / "src" / "main.py").write_text(
        textwrap.dedent("""\
            class {{ projectName | pascal_case }}Cli:
                prog = "{{ projectName | slugify }}"


            def main() -> None:
                print("hello from {{ projectName | snake_case }}")
        """),
        encoding="utf-8",
    )
    (files / "static.txt").write_text("no templating here\n", encoding="utf-8")
    (files / "logo.bin").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe{{x}}")
    return root


@pytest.fixture
def template_with_callback(template_source: Path) -> Path:
    """Template source whose Python config module defines an end callback."""
    (template_source / ".meta.json").unlink()
    (template_source / "meta.py").write_text(
        textwrap.dedent("""\
            questions = [{"name": "description", "message": "Description"}]


            def end_callback(context, helpers):
                marker = context.dest_path / "CALLBACK_RAN"
                marker.write_text(",".join(sorted(helpers.files)), encoding="utf-8")
        """),
        encoding="utf-8",
    )
    return template_source


# ---------------------------------------------------------------------------
# Registry & config
# ---------------------------------------------------------------------------

@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    return tmp_path / "registry" / "templates.json"


@pytest.fixture
def registry(registry_path: Path) -> TemplateRegistry:
    """Empty registry persisted under ``tmp_path``."""
    return TemplateRegistry(registry_path)


@pytest.fixture
def config(registry_path: Path) -> Config:
    return Config(registry_path=registry_path)


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

def make_prompt_engine(*replies: dict[str, Any]) -> PromptEngine:
    """Return a ``PromptEngine`` whose ``prompt`` yields *replies* in order."""
    engine = PromptEngine()
    engine.prompt = AsyncMock(side_effect=list(replies))  # type: ignore[method-assign]
    return engine


@pytest.fixture
def scripted_prompts():
    """Factory fixture: ``scripted_prompts({"a": 1}, {"b": 2})``."""
    return make_prompt_engine
