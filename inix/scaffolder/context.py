"""Per-run scaffolding state: the metadata context and the file set."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console

from inix.errors import CopyError
from inix.utils import ConsoleLogger

FileSet = dict[str, bytes]
"""Relative POSIX path -> file content."""


@dataclass
class MetadataContext:
    """Mutable state shared by the pipeline stages of a single run.

    ``dest_path`` is fixed at construction; ``answers`` is rewritten by the
    Question Stage and then merged into by the Answer-Merge Stage.
    """

    dest_path: Path
    answers: dict[str, Any] = field(default_factory=dict)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "dest_path" and "dest_path" in self.__dict__:
            raise AttributeError("dest_path cannot be changed once the run has started")
        super().__setattr__(name, value)


@dataclass
class ScaffoldHelpers:
    """Run-scoped helpers handed to a template's end callback."""

    console: Console
    logger: ConsoleLogger
    files: FileSet


def resolve_dest_path(
    dest_path: str | Path | None,
    answers: dict[str, Any],
    cwd: Path | None = None,
) -> Path:
    """Return *dest_path*, or ``<cwd>/<projectName>`` when it is not given.

    Without a ``projectName`` answer the working directory itself is used.
    """
    if dest_path:
        return Path(dest_path)
    base = cwd or Path.cwd()
    project_name = answers.get("projectName") or ""
    return base / str(project_name)


def collect_files(source_dir: Path) -> FileSet:
    """Read every regular file under *source_dir* into a ``FileSet``."""
    files: FileSet = {}
    for path in sorted(source_dir.rglob("*")):
        if path.is_file():
            files[path.relative_to(source_dir).as_posix()] = path.read_bytes()
    return files


def write_files(files: FileSet, dest_dir: Path) -> list[Path]:
    """Write *files* under *dest_dir*, keeping whatever already lives there.

    Raises:
        CopyError: If a directory or file cannot be written.
    """
    written: list[Path] = []
    for rel_path, content in files.items():
        target = dest_dir / rel_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise CopyError(target, exc.strerror or str(exc)) from exc
        written.append(target)
    return written
