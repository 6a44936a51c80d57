"""Command-line entry point for inix.

Usage::

    inix create                              # pick a registered template
    inix create ./my-template --name demo    # scaffold from a path or git URL
    inix add vue https://github.com/acme/vue-template.git --branch next
    inix list
    inix remove vue
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from rich.table import Table

from inix import __version__
from inix.config import Config
from inix.errors import InixError
from inix.options import QuestionSpec, load_options
from inix.pipeline import Pipeline, RunOptions
from inix.prompts import PromptEngine
from inix.registry import TemplateRegistry
from inix.scaffolder.context import MetadataContext
from inix.source import resolve_template
from inix.utils import (
    PROJECT_NAME_RE,
    console,
    create_progress,
    is_valid_project_name,
    print_error,
    print_success,
    print_warning,
)

NO_TEMPLATES_MESSAGE = (
    "Can not find any template.\n"
    "Try to add one by running:\n"
    "  $ inix add <name> <path-or-git-url>"
)


def _validate_project_name(value: Any) -> bool | str:
    if not value:
        return "please input your project name"
    if is_valid_project_name(str(value)):
        return True
    return f"input should match {PROJECT_NAME_RE.pattern}"


# ---------------------------------------------------------------------------
# Create flow
# ---------------------------------------------------------------------------


async def resolve_run_options(
    run_options: RunOptions,
    registry: TemplateRegistry,
    prompt_engine: PromptEngine,
) -> RunOptions | None:
    """Fill in template selection and project name before the pipeline runs.

    Returns ``None`` when no template path was given and the registry is
    empty, after telling the user how to add one.
    """
    answers = dict(run_options.answers)

    if not run_options.template_path:
        names = registry.names()
        if not names:
            print_warning(NO_TEMPLATES_MESSAGE)
            return None
        selected = await prompt_engine.prompt([
            QuestionSpec(
                name="template",
                type="list",
                message="Select template which you want",
                default=names[0],
                choices=names,
            )
        ])
        answers["template"] = selected["template"]

    if not answers.get("projectName"):
        named = await prompt_engine.prompt([
            QuestionSpec(
                name="projectName",
                message="Project name",
                validate=_validate_project_name,
            )
        ])
        answers["projectName"] = named["projectName"]

    template_path = run_options.template_path or registry.get(answers["template"]).reference()
    return run_options.model_copy(update={"template_path": template_path, "answers": answers})


async def create_project(
    run_options: RunOptions,
    config: Config,
    registry: TemplateRegistry,
    prompt_engine: PromptEngine | None = None,
) -> MetadataContext | None:
    """Resolve options, fetch the template and run the scaffolding pipeline."""
    prompt_engine = prompt_engine or PromptEngine()

    resolved = await resolve_run_options(run_options, registry, prompt_engine)
    if resolved is None:
        return None

    with create_progress() as progress:
        progress.add_task("Fetching template...", total=None)
        template_directory = await resolve_template(
            resolved.template_path or "", config.git_executable
        )
    resolved.template_directory = template_directory

    template_options = load_options(template_directory, config.config_module_name)
    pipeline = Pipeline(config, prompt_engine=prompt_engine)
    return await pipeline.run(resolved, template_options)


# ---------------------------------------------------------------------------
# Registry commands
# ---------------------------------------------------------------------------


def _print_templates(registry: TemplateRegistry) -> None:
    if not len(registry):
        print_warning(NO_TEMPLATES_MESSAGE)
        return

    table = Table(title="Templates", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Source")
    table.add_column("Branch", style="dim")
    for name, record in registry.records().items():
        table.add_row(name, record.template_path, record.branch or "")
    console.print(table)


def _cmd_create(args: argparse.Namespace, config: Config, registry: TemplateRegistry) -> None:
    answers: dict[str, Any] = {}
    if args.name:
        answers["projectName"] = args.name
    run_options = RunOptions(
        template_path=args.template,
        dest_path=Path(args.dest) if args.dest else None,
        answers=answers,
    )
    asyncio.run(create_project(run_options, config, registry))


def _cmd_add(args: argparse.Namespace, config: Config, registry: TemplateRegistry) -> None:
    record = registry.add(args.name, args.template_path, args.branch, overwrite=args.force)
    print_success(f"Added template '{record.name}' -> {record.reference()}")


def _cmd_list(args: argparse.Namespace, config: Config, registry: TemplateRegistry) -> None:
    _print_templates(registry)


def _cmd_remove(args: argparse.Namespace, config: Config, registry: TemplateRegistry) -> None:
    registry.remove(args.name)
    print_success(f"Removed template '{args.name}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inix",
        description="inix -- scaffold new projects from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  inix create ./my-template --name demo\n"
            "  inix add vue https://github.com/acme/vue-template.git --branch next\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--registry",
        default=None,
        help="Template registry file (default: $INIX_REGISTRY or ~/.inix/templates.json)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a project from a template")
    create.add_argument(
        "template",
        nargs="?",
        default=None,
        help="Template path or git URL (prompted from the registry if omitted)",
    )
    create.add_argument("--name", "-n", default=None, help="Project name")
    create.add_argument(
        "--dest", "-d", default=None, help="Destination directory (default: ./<name>)"
    )
    create.set_defaults(func=_cmd_create)

    add = sub.add_parser("add", help="Register a template")
    add.add_argument("name", help="Template name")
    add.add_argument("template_path", help="Local path or git URL")
    add.add_argument("--branch", "-b", default=None, help="Git branch to check out")
    add.add_argument("--force", "-f", action="store_true", help="Replace an existing entry")
    add.set_defaults(func=_cmd_add)

    lst = sub.add_parser("list", help="List registered templates")
    lst.set_defaults(func=_cmd_list)

    remove = sub.add_parser("remove", help="Unregister a template")
    remove.add_argument("name", help="Template name")
    remove.set_defaults(func=_cmd_remove)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``inix`` / ``python -m inix``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.registry:
        config.registry_path = Path(args.registry).expanduser()

    try:
        registry = TemplateRegistry(config.registry_path)
        args.func(args, config, registry)
    except InixError as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
