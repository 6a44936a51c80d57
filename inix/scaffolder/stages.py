"""Pipeline stages.

Each stage works on the run's ``MetadataContext`` and ``FileSet``.  The
runner executes them strictly in order:

1. ``QuestionStage``    -- ask template questions, replace ``answers``
2. ``AnswerMergeStage`` -- overlay pre-supplied answers
3. ``RenderStage``      -- render every file that contains ``{{ ... }}``

``Stage.execute`` wraps ``run`` and reports a ``StageOutcome`` rather than
raising, so the runner can record every step before short-circuiting.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from jinja2 import TemplateError

from inix.errors import RenderError
from inix.options import QuestionSpec
from inix.prompts import PromptEngine
from inix.scaffolder.context import FileSet, MetadataContext
from inix.scaffolder.templates import TemplateRenderer, has_template_tokens


@dataclass
class StageOutcome:
    """Result of one stage execution: either ok or carrying its error."""

    stage: str
    error: BaseException | None = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class Stage(ABC):
    """One unit of the scaffolding pipeline."""

    name: str = "stage"

    @abstractmethod
    async def run(self, context: MetadataContext, files: FileSet) -> None:
        """Apply the stage to *context* and *files* in place."""

    async def execute(self, context: MetadataContext, files: FileSet) -> StageOutcome:
        start = time.monotonic()
        try:
            await self.run(context, files)
        except Exception as exc:
            return StageOutcome(self.name, error=exc, duration=time.monotonic() - start)
        return StageOutcome(self.name, duration=time.monotonic() - start)


class QuestionStage(Stage):
    """Ask the template's questions and store the replies as ``answers``."""

    name = "questions"

    def __init__(
        self,
        questions: list[QuestionSpec] | None,
        prompt_engine: PromptEngine | None = None,
    ) -> None:
        self.questions = list(questions or [])
        self.prompt_engine = prompt_engine or PromptEngine()

    async def run(self, context: MetadataContext, files: FileSet) -> None:
        if not self.questions:
            context.answers = {}
            return
        context.answers = await self.prompt_engine.prompt(self.questions)


class AnswerMergeStage(Stage):
    """Overlay the answers collected before the pipeline started.

    Runs after ``QuestionStage`` so that engine-level answers (template,
    projectName) win over template questions of the same name.
    """

    name = "merge-answers"

    def __init__(self, answers: dict[str, Any]) -> None:
        self.answers = dict(answers)

    async def run(self, context: MetadataContext, files: FileSet) -> None:
        context.answers.update(self.answers)


class RenderStage(Stage):
    """Render template expressions in every text file, one file at a time."""

    name = "render"

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def run(self, context: MetadataContext, files: FileSet) -> None:
        for rel_path in list(files):
            try:
                text = files[rel_path].decode("utf-8")
            except UnicodeDecodeError:
                # binary
                continue

            if not has_template_tokens(text):
                continue

            try:
                rendered = await self.renderer.render_string(text, context.answers)
            except TemplateError as exc:
                raise RenderError(rel_path, exc.message or str(exc)) from exc
            except Exception as exc:
                raise RenderError(rel_path, f"{type(exc).__name__}: {exc}") from exc
            files[rel_path] = rendered.encode("utf-8")


def default_stages(
    questions: list[QuestionSpec] | None,
    answers: dict[str, Any],
    *,
    prompt_engine: PromptEngine | None = None,
    renderer: TemplateRenderer | None = None,
) -> list[Stage]:
    """Return the fixed question -> merge -> render stage sequence."""
    return [
        QuestionStage(questions, prompt_engine),
        AnswerMergeStage(answers),
        RenderStage(renderer),
    ]
