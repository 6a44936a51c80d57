"""inix Pipeline Runner.

Scaffolds one project from an already-materialised template directory:

1. BUILD CONTEXT -- resolve the destination, seed the metadata context.
2. RUN STAGES    -- questions -> merge answers -> render, fail-fast.
3. COPY FILES    -- write the file set into the destination (non-destructive).
4. CALLBACK      -- run the template's end callback, or report success.

Usage::

    pipeline = Pipeline(Config())
    context = await pipeline.run(run_options, load_options(template_directory))
"""

from __future__ import annotations

import asyncio
import inspect
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from inix.config import Config
from inix.errors import UnresolvedTemplateError
from inix.options import TemplateOptions
from inix.prompts import PromptEngine
from inix.scaffolder.context import (
    FileSet,
    MetadataContext,
    ScaffoldHelpers,
    collect_files,
    resolve_dest_path,
    write_files,
)
from inix.scaffolder.stages import Stage, StageOutcome, default_stages
from inix.scaffolder.templates import TemplateRenderer
from inix.utils import console, logger, print_success

# ---------------------------------------------------------------------------
# Run options & state
# ---------------------------------------------------------------------------


class RunOptions(BaseModel):
    """Per-invocation settings, filled in before the pipeline starts."""

    template_path: str | None = None
    template_directory: Path | None = None
    dest_path: Path | None = None
    answers: dict[str, Any] = Field(default_factory=dict)


class RunState(str, Enum):
    INIT = "init"
    BUILDING_CONTEXT = "building-context"
    RUNNING_STAGES = "running-stages"
    COPYING_FILES = "copying-files"
    INVOKING_CALLBACK = "invoking-callback"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Pipeline Runner
# ---------------------------------------------------------------------------


class Pipeline:
    """Runs the scaffolding stages for a single project.

    A ``Pipeline`` instance drives exactly one run; context and file set are
    created inside ``run`` and never shared across runs.

    Attributes:
        config: Global configuration.
        state: Current ``RunState``.
        outcomes: One ``StageOutcome`` per executed stage, in order.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        prompt_engine: PromptEngine | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or Config()
        self.prompt_engine = prompt_engine or PromptEngine()
        self.renderer = renderer or TemplateRenderer()
        self.state = RunState.INIT
        self.outcomes: list[StageOutcome] = []

    def build_stages(self, run_options: RunOptions, template_options: TemplateOptions) -> list[Stage]:
        return default_stages(
            template_options.questions,
            run_options.answers,
            prompt_engine=self.prompt_engine,
            renderer=self.renderer,
        )

    async def run(
        self, run_options: RunOptions, template_options: TemplateOptions
    ) -> MetadataContext:
        """Execute the pipeline and return the final metadata context.

        Raises:
            InixError: The first error raised by any step, unmodified.
        """
        try:
            return await self._run(run_options, template_options)
        except BaseException:
            self.state = RunState.FAILED
            raise

    async def _run(
        self, run_options: RunOptions, template_options: TemplateOptions
    ) -> MetadataContext:
        # 1. Context and file set
        self.state = RunState.BUILDING_CONTEXT
        context = MetadataContext(
            dest_path=resolve_dest_path(run_options.dest_path, run_options.answers),
            answers=dict(run_options.answers),
        )
        files = await asyncio.to_thread(self._collect, run_options)

        # 2. Stages, short-circuiting on the first failure
        self.state = RunState.RUNNING_STAGES
        for stage in self.build_stages(run_options, template_options):
            outcome = await stage.execute(context, files)
            self.outcomes.append(outcome)
            if outcome.error is not None:
                raise outcome.error

        # 3. Copy into the destination without cleaning it
        self.state = RunState.COPYING_FILES
        await asyncio.to_thread(write_files, files, context.dest_path)

        # 4. End callback
        self.state = RunState.INVOKING_CALLBACK
        await self._finish(context, files, template_options)

        self.state = RunState.DONE
        return context

    def _collect(self, run_options: RunOptions) -> FileSet:
        if run_options.template_directory is None:
            raise UnresolvedTemplateError(
                run_options.template_path or "", "No template directory to scaffold from"
            )
        source_dir = run_options.template_directory / self.config.template_subdir
        if not source_dir.is_dir():
            raise UnresolvedTemplateError(
                run_options.template_path or str(run_options.template_directory),
                f"Template has no '{self.config.template_subdir}' folder: {source_dir}",
            )
        return collect_files(source_dir)

    async def _finish(
        self,
        context: MetadataContext,
        files: FileSet,
        template_options: TemplateOptions,
    ) -> None:
        callback = template_options.end_callback
        if callback is None:
            print_success("init success")
            return

        helpers = ScaffoldHelpers(console=console, logger=logger, files=files)
        result = callback(context, helpers)
        if inspect.isawaitable(result):
            await result
