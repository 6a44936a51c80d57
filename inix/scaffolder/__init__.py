"""inix scaffolder -- stages that turn a template file set into a project.

Quick usage::

    from inix.scaffolder import MetadataContext, RenderStage

    context = MetadataContext(dest_path=Path("demo"), answers={"name": "World"})
    files = {"a.txt": b"Hello {{name}}"}
    await RenderStage().run(context, files)
    # files == {"a.txt": b"Hello World"}
"""

from inix.scaffolder.context import (
    FileSet,
    MetadataContext,
    ScaffoldHelpers,
    collect_files,
    resolve_dest_path,
    write_files,
)
from inix.scaffolder.stages import (
    AnswerMergeStage,
    QuestionStage,
    RenderStage,
    Stage,
    StageOutcome,
    default_stages,
)
from inix.scaffolder.templates import TemplateRenderer, has_template_tokens

__all__ = [
    "AnswerMergeStage",
    "FileSet",
    "MetadataContext",
    "QuestionStage",
    "RenderStage",
    "ScaffoldHelpers",
    "Stage",
    "StageOutcome",
    "TemplateRenderer",
    "collect_files",
    "default_stages",
    "has_template_tokens",
    "resolve_dest_path",
    "write_files",
]
