"""Unit tests for the CLI and create flow (inix.cli).

Tests cover:
- resolve_run_options: registry selection, project-name prompting,
  empty-registry warning, branch-suffixed references
- create_project end to end with a local template (prompts mocked)
- main(): add / list / remove / create commands and error exit codes
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from inix.cli import (
    _validate_project_name,
    build_parser,
    create_project,
    main,
    resolve_run_options,
)
from inix.pipeline import RunOptions

pytestmark = pytest.mark.unit


class TestValidateProjectName:
    def test_empty(self):
        assert _validate_project_name("") == "please input your project name"

    def test_valid(self):
        assert _validate_project_name("my-app_2") is True

    def test_invalid_characters(self):
        assert "should match" in _validate_project_name("my app!")


class TestResolveRunOptions:
    @pytest.mark.asyncio
    async def test_empty_registry_without_path_returns_none(self, registry, scripted_prompts):
        engine = scripted_prompts()
        with patch("inix.cli.print_warning") as mock_warn:
            result = await resolve_run_options(RunOptions(), registry, engine)

        assert result is None
        mock_warn.assert_called_once()
        engine.prompt.assert_not_called()

    @pytest.mark.asyncio
    async def test_selects_template_and_prompts_name(self, registry, scripted_prompts):
        registry.add("vue", "https://h/vue.git", "next")
        registry.add("local", "/t/local")
        engine = scripted_prompts({"template": "vue"}, {"projectName": "demo"})

        result = await resolve_run_options(RunOptions(), registry, engine)

        assert result.template_path == "https://h/vue.git#next"
        assert result.answers == {"template": "vue", "projectName": "demo"}
        template_question = engine.prompt.await_args_list[0].args[0][0]
        assert template_question.type == "list"
        assert template_question.choices == ["vue", "local"]
        assert template_question.default == "vue"

    @pytest.mark.asyncio
    async def test_explicit_path_skips_template_question(self, registry, scripted_prompts):
        engine = scripted_prompts({"projectName": "demo"})

        result = await resolve_run_options(RunOptions(template_path="./tpl"), registry, engine)

        assert result.template_path == "./tpl"
        assert result.answers == {"projectName": "demo"}
        engine.prompt.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_given_project_name_not_prompted(self, registry, scripted_prompts):
        engine = scripted_prompts()
        options = RunOptions(template_path="./tpl", answers={"projectName": "given"})

        result = await resolve_run_options(options, registry, engine)

        assert result.answers == {"projectName": "given"}
        engine.prompt.assert_not_called()

    @pytest.mark.asyncio
    async def test_input_options_not_mutated(self, registry, scripted_prompts):
        options = RunOptions(template_path="./tpl")
        await resolve_run_options(options, registry, scripted_prompts({"projectName": "demo"}))
        assert options.answers == {}


class TestCreateProject:
    @pytest.mark.asyncio
    async def test_local_template(self, config, registry, scripted_prompts, template_source, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        engine = scripted_prompts({"description": "Generated"})

        context = await create_project(
            RunOptions(template_path=str(template_source), answers={"projectName": "demo"}),
            config,
            registry,
            engine,
        )

        assert context.dest_path == Path.cwd() / "demo"
        assert (tmp_path / "demo" / "README.md").read_text() == "# demo\n\nGenerated\n"
        # The template source itself is never written to.
        assert "{{" in (template_source / "template" / "README.md").read_text()

    @pytest.mark.asyncio
    async def test_registered_template(self, config, registry, scripted_prompts, template_source, tmp_path):
        registry.add("local", str(template_source))
        engine = scripted_prompts({"template": "local"}, {"projectName": "demo"}, {"description": "x"})

        context = await create_project(
            RunOptions(dest_path=tmp_path / "out"), config, registry, engine
        )

        assert context.answers["template"] == "local"
        assert (tmp_path / "out" / "README.md").read_text() == "# demo\n\nx\n"

    @pytest.mark.asyncio
    async def test_empty_registry_returns_none(self, config, registry, scripted_prompts):
        with patch("inix.cli.resolve_template") as mock_resolve:
            assert await create_project(RunOptions(), config, registry, scripted_prompts()) is None
        mock_resolve.assert_not_called()


class TestMain:
    def test_parser_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_add_list_remove(self, registry_path: Path, capsys):
        main(["--registry", str(registry_path), "add", "vue", "https://h/vue.git", "-b", "next"])
        assert json.loads(registry_path.read_text()) == {
            "vue": {"template_path": "https://h/vue.git", "branch": "next"}
        }

        main(["--registry", str(registry_path), "list"])
        assert "vue" in capsys.readouterr().out

        main(["--registry", str(registry_path), "remove", "vue"])
        assert json.loads(registry_path.read_text()) == {}

    def test_duplicate_add_exits_1(self, registry_path: Path):
        main(["--registry", str(registry_path), "add", "vue", "/t/vue"])
        with pytest.raises(SystemExit) as exc_info:
            main(["--registry", str(registry_path), "add", "vue", "/t/other"])
        assert exc_info.value.code == 1

    def test_remove_unknown_exits_1(self, registry_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--registry", str(registry_path), "remove", "ghost"])
        assert exc_info.value.code == 1

    def test_create_unknown_template_exits_1(self, registry_path: Path, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main([
                "--registry", str(registry_path),
                "create", str(tmp_path / "missing"), "--name", "demo",
            ])
        assert exc_info.value.code == 1

    def test_create_passes_options(self, registry_path: Path, tmp_path: Path):
        with patch("inix.cli.create_project") as mock_create:
            main([
                "--registry", str(registry_path),
                "create", "./tpl", "--name", "demo", "--dest", str(tmp_path / "d"),
            ])

        run_options, config, registry = mock_create.call_args.args
        assert run_options.template_path == "./tpl"
        assert run_options.dest_path == tmp_path / "d"
        assert run_options.answers == {"projectName": "demo"}
        assert config.registry_path == registry_path
