"""Template-specific configuration discovery.

A template source may ship a config file in its root declaring the questions
to ask and an optional end callback.  The first file found among the search
places wins::

    .metarc  .meta.json  .meta.yaml  .meta.yml  .meta.py  meta.py

``.metarc`` may hold YAML or JSON.  Python modules expose ``questions`` and
``end_callback`` as module attributes; data files can only declare questions.
"""

from __future__ import annotations

import importlib.util
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from inix.errors import MalformedConfigError

QuestionType = Literal["input", "password", "number", "confirm", "list"]


class QuestionSpec(BaseModel):
    """One interactive question asked by the Question Stage."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    type: QuestionType = "input"
    message: str | None = None
    default: Any = None
    choices: list[Any] = Field(default_factory=list)
    validate_answer: Callable[[Any], Any] | None = Field(default=None, alias="validate")

    @property
    def prompt_text(self) -> str:
        return self.message or self.name


class TemplateOptions(BaseModel):
    """Validated template configuration; every field is optional."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    questions: list[QuestionSpec] = Field(default_factory=list)
    end_callback: Callable[..., Any] | None = Field(default=None, alias="endCallback")


def search_places(module_name: str = "meta") -> list[str]:
    """Return the config filenames probed in a template root, in priority order."""
    return [
        f".{module_name}rc",
        f".{module_name}.json",
        f".{module_name}.yaml",
        f".{module_name}.yml",
        f".{module_name}.py",
        f"{module_name}.py",
    ]


def find_config_file(directory: str | Path, module_name: str = "meta") -> Path | None:
    """Return the first existing config file in *directory*, or ``None``."""
    root = Path(directory)
    for filename in search_places(module_name):
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def load_options(directory: str | Path, module_name: str = "meta") -> TemplateOptions:
    """Load the template configuration found in *directory*.

    Returns an empty ``TemplateOptions`` when no config file exists or the
    file is empty.

    Raises:
        MalformedConfigError: If a config file exists but cannot be parsed
            or does not match the expected shape.
    """
    path = find_config_file(directory, module_name)
    if path is None:
        return TemplateOptions()

    if path.suffix == ".py":
        raw = _load_python_config(path)
    else:
        raw = _load_data_config(path)

    if raw is None:
        return TemplateOptions()
    if not isinstance(raw, dict):
        raise MalformedConfigError(path, f"expected a mapping, got {type(raw).__name__}")

    try:
        return TemplateOptions.model_validate(raw)
    except ValidationError as exc:
        raise MalformedConfigError(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def _load_data_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedConfigError(path, str(exc)) from exc

    if not text.strip():
        return None

    try:
        if path.suffix == ".json":
            return json.loads(text)
        # YAML is a superset of JSON, so the extensionless rc file goes here too.
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MalformedConfigError(path, str(exc)) from exc


def _load_python_config(path: Path) -> dict[str, Any]:
    module_name = f"_inix_template_config_{abs(hash(str(path.resolve())))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise MalformedConfigError(path, "cannot be imported as a Python module")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise MalformedConfigError(path, f"{type(exc).__name__}: {exc}") from exc

    raw: dict[str, Any] = {}
    if hasattr(module, "questions"):
        raw["questions"] = module.questions
    if hasattr(module, "end_callback"):
        raw["end_callback"] = module.end_callback
    return raw
