"""Template source resolution.

Turns a template reference -- a git URL (optionally ``#branch``-suffixed) or
a local filesystem path -- into a private working copy in a fresh temporary
directory.  The pipeline only ever reads from that copy.
"""

from __future__ import annotations

import asyncio
import re
import shutil
import tempfile
from pathlib import Path

from inix.errors import FetchError, UnresolvedTemplateError
from inix.utils import run_command

_GIT_URL_RE = re.compile(
    r"^(?:git|ssh|https?|git@[-\w.]+):(//)?(.*?)(\.git)(/?|#[-\w./]+?)$"
)

TEMP_PREFIX = "inix-"


def is_git_url(reference: str) -> bool:
    """Return ``True`` if *reference* looks like a git repository locator.

    Only URLs ending in ``.git`` (optionally followed by ``/`` or
    ``#branch``) are recognised::

        is_git_url("https://github.com/acme/app.git")         -> True
        is_git_url("git@github.com:acme/app.git#develop")     -> True
        is_git_url("./local-template")                        -> False
    """
    return _GIT_URL_RE.match(reference) is not None


def split_locator(locator: str) -> tuple[str, str | None]:
    """Split ``url#branch`` into ``(url, branch)``; branch is ``None`` if absent."""
    url, sep, branch = locator.partition("#")
    return url, (branch if sep and branch else None)


async def download_repo(locator: str, dest_dir: str | Path, git_executable: str = "git") -> Path:
    """Shallow-clone *locator* into *dest_dir* and wait for git to finish.

    Raises:
        FetchError: If git exits with a non-zero status.
    """
    url, branch = split_locator(locator)
    cmd = [git_executable, "clone", "--depth", "1"]
    if branch:
        cmd += ["--branch", branch]
    cmd += [url, str(dest_dir)]

    returncode, _stdout, stderr = await run_command(cmd)
    if returncode != 0:
        raise FetchError(
            f"git clone failed (exit {returncode}) for {locator}\n{stderr}",
            locator=locator,
            stderr=stderr,
        )
    return Path(dest_dir)


async def resolve_template(reference: str, git_executable: str = "git") -> Path:
    """Materialise *reference* into a new temporary directory and return it.

    Git locators are checked first, then existing filesystem paths.  On
    success the temporary directory is left in place for the caller to clean
    up; a failed clone removes it.

    Raises:
        UnresolvedTemplateError: If *reference* is neither.
        FetchError: If cloning a git locator fails.
    """
    if is_git_url(reference):
        temporary_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        try:
            await download_repo(reference, temporary_dir, git_executable)
        except FetchError:
            shutil.rmtree(temporary_dir, ignore_errors=True)
            raise
        return temporary_dir

    source = Path(reference).expanduser()
    if source.exists():
        if not source.is_dir():
            raise UnresolvedTemplateError(
                reference, f"Template path is not a directory: {reference}"
            )
        temporary_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        await asyncio.to_thread(
            shutil.copytree, source, temporary_dir, dirs_exist_ok=True
        )
        return temporary_dir

    raise UnresolvedTemplateError(reference)
