"""inix configuration.

Centralised, typed configuration for the scaffolding engine.  Settings use
Pydantic v2 models so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_REGISTRY_PATH = Path.home() / ".inix" / "templates.json"


class Config(BaseModel):
    """Global inix configuration.

    Instances are created once by the CLI entry point and passed to the
    registry, resolver and pipeline.
    """

    registry_path: Path = Field(
        default=DEFAULT_REGISTRY_PATH,
        description="JSON file holding the named template records",
    )
    config_module_name: str = Field(
        default="meta",
        min_length=1,
        description="Product identifier used to build config search places",
    )
    template_subdir: str = Field(
        default="template",
        min_length=1,
        description="Folder inside a template source holding the files to render",
    )
    git_executable: str = Field(default="git", min_length=1)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            INIX_REGISTRY, INIX_CONFIG_NAME, INIX_TEMPLATE_SUBDIR, INIX_GIT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("INIX_REGISTRY"):
            kwargs["registry_path"] = Path(os.environ["INIX_REGISTRY"]).expanduser()
        if os.environ.get("INIX_CONFIG_NAME"):
            kwargs["config_module_name"] = os.environ["INIX_CONFIG_NAME"]
        if os.environ.get("INIX_TEMPLATE_SUBDIR"):
            kwargs["template_subdir"] = os.environ["INIX_TEMPLATE_SUBDIR"]
        if os.environ.get("INIX_GIT"):
            kwargs["git_executable"] = os.environ["INIX_GIT"]
        return cls(**kwargs)
