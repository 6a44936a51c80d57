"""Interactive prompts built on ``rich.prompt``.

``PromptEngine.prompt`` asks a list of ``QuestionSpec`` in order and returns a
``{name: answer}`` mapping.  Ctrl-C or end-of-input surfaces as
``PromptAbortedError``.  Each blocking Rich prompt runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from inix.errors import PromptAbortedError
from inix.options import QuestionSpec
from inix.utils import console as default_console


def _choice_pairs(choices: list[Any]) -> list[tuple[str, Any]]:
    """Normalise choices to ``(label, value)`` pairs.

    A choice is either a scalar or a ``{"name": ..., "value": ...}`` mapping.
    """
    pairs: list[tuple[str, Any]] = []
    for choice in choices:
        if isinstance(choice, dict):
            label = str(choice.get("name", choice.get("value", "")))
            pairs.append((label, choice.get("value", label)))
        else:
            pairs.append((str(choice), choice))
    return pairs


class PromptEngine:
    """Asks questions on a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    async def prompt(self, questions: list[QuestionSpec]) -> dict[str, Any]:
        """Ask every question in order and return the collected answers."""
        answers: dict[str, Any] = {}
        try:
            for question in questions:
                answers[question.name] = await asyncio.to_thread(self._ask_until_valid, question)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptAbortedError("Prompt cancelled by user") from exc
        return answers

    # -- Internals ---------------------------------------------------------

    def _ask_until_valid(self, question: QuestionSpec) -> Any:
        while True:
            answer = self._ask(question)
            if question.validate_answer is None:
                return answer
            verdict = question.validate_answer(answer)
            if verdict is True:
                return answer
            message = verdict if isinstance(verdict, str) else "Invalid answer"
            self.console.print(f"[bold red]>> {message}[/bold red]")

    def _ask(self, question: QuestionSpec) -> Any:
        text = question.prompt_text

        if question.type == "confirm":
            default = bool(question.default) if question.default is not None else False
            return Confirm.ask(text, default=default, console=self.console)

        if question.type == "number":
            if question.default is None:
                return IntPrompt.ask(text, console=self.console)
            return IntPrompt.ask(text, default=int(question.default), console=self.console)

        if question.type == "list":
            pairs = _choice_pairs(question.choices)
            labels = [label for label, _ in pairs]
            default_label = labels[0] if labels else None
            for label, value in pairs:
                if question.default is not None and question.default in (label, value):
                    default_label = label
            picked = Prompt.ask(
                text, choices=labels, default=default_label, console=self.console
            )
            return dict(pairs)[picked]

        password = question.type == "password"
        if question.default is None:
            return Prompt.ask(text, password=password, console=self.console)
        return Prompt.ask(
            text, default=str(question.default), password=password, console=self.console
        )
