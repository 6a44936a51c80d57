"""Exception taxonomy for inix.

Every error raised by the scaffolding pipeline derives from ``InixError``.
Nothing inside the pipeline catches these: the first one raised aborts the
run and reaches the caller unchanged.
"""

from __future__ import annotations

from pathlib import Path


class InixError(Exception):
    """Base class for all inix failures."""


class UnresolvedTemplateError(InixError):
    """Template reference is neither a git locator nor an existing path."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        self.reference = reference
        super().__init__(message or f"Unknown template path: {reference}")


class FetchError(InixError):
    """Cloning a remote template repository failed."""

    def __init__(self, message: str, locator: str = "", stderr: str = "") -> None:
        self.locator = locator
        self.stderr = stderr
        super().__init__(message)


class MalformedConfigError(InixError):
    """A template configuration file was found but could not be loaded."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Malformed config file {path}: {message}")


class RenderError(InixError):
    """Rendering a single template file failed.

    The message is the renderer's message prefixed with ``[<path>]``.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"[{path}] {message}")


class CopyError(InixError):
    """Writing a file into the destination directory failed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Failed to write {path}: {message}")


class PromptAbortedError(InixError):
    """The user cancelled interactive input."""


class RegistryError(InixError):
    """The template registry could not satisfy a lookup or update."""
