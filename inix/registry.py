"""Persisted registry of named templates.

The registry is a JSON object mapping template name to record::

    {
      "vue-app": {"template_path": "https://github.com/acme/vue-app.git", "branch": "next"},
      "local":   {"template_path": "/home/me/templates/local"}
    }

It is an explicit object, handed to whoever needs name resolution.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from inix.errors import RegistryError
from inix.source import is_git_url
from inix.utils import load_json, save_json


class TemplateRecord(BaseModel):
    """A named template source, optionally pinned to a branch."""

    name: str = Field(..., min_length=1)
    template_path: str = Field(..., min_length=1)
    branch: str | None = None

    def reference(self) -> str:
        """Return the TemplateReference used to resolve this record.

        Git locators get a ``#branch`` suffix when a branch is set; the
        branch is meaningless for local paths and is ignored there.
        """
        if self.branch and is_git_url(self.template_path):
            return f"{self.template_path}#{self.branch}"
        return self.template_path


class TemplateRegistry:
    """Name -> ``TemplateRecord`` store backed by a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._records: dict[str, TemplateRecord] = {}
        self.load()

    # -- Persistence -------------------------------------------------------

    def load(self) -> None:
        """(Re)read the registry file.  A missing file is an empty registry."""
        self._records = {}
        if not self.path.exists():
            return
        try:
            raw = load_json(self.path)
        except (OSError, json.JSONDecodeError) as exc:
            raise RegistryError(f"Cannot read template registry {self.path}: {exc}") from exc

        for name, entry in raw.items():
            if not isinstance(entry, dict):
                raise RegistryError(
                    f"Invalid record for template '{name}' in {self.path}: expected an object"
                )
            try:
                self._records[name] = TemplateRecord(name=name, **entry)
            except (TypeError, ValidationError) as exc:
                raise RegistryError(
                    f"Invalid record for template '{name}' in {self.path}: {exc}"
                ) from exc

    def save(self) -> None:
        """Write all records back to the registry file."""
        data = {
            name: record.model_dump(exclude={"name"}, exclude_none=True)
            for name, record in self._records.items()
        }
        save_json(data, self.path)

    # -- Queries -----------------------------------------------------------

    def records(self) -> dict[str, TemplateRecord]:
        """Return a copy of the name -> record mapping, in insertion order."""
        return dict(self._records)

    def names(self) -> list[str]:
        return list(self._records)

    def get(self, name: str) -> TemplateRecord:
        try:
            return self._records[name]
        except KeyError:
            raise RegistryError(f"No template named '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    # -- Mutations ---------------------------------------------------------

    def add(
        self,
        name: str,
        template_path: str,
        branch: str | None = None,
        *,
        overwrite: bool = False,
    ) -> TemplateRecord:
        """Register a template and persist the registry.

        Raises:
            RegistryError: If *name* already exists and *overwrite* is false.
        """
        if name in self._records and not overwrite:
            raise RegistryError(f"Template '{name}' already exists")
        try:
            record = TemplateRecord(name=name, template_path=template_path, branch=branch)
        except ValidationError as exc:
            raise RegistryError(f"Invalid template record: {exc}") from exc
        self._records[name] = record
        self.save()
        return record

    def remove(self, name: str) -> TemplateRecord:
        """Unregister a template and persist the registry."""
        record = self.get(name)
        del self._records[name]
        self.save()
        return record
