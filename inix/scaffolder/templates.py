"""Jinja2 template rendering for project scaffolding.

Provides the ``TemplateRenderer`` used by the Render Stage: it renders the
text of a single template file against the run's answers.  Double-curly
expressions (``{{ project_name }}``) are the only syntax template authors
usually need.  Statements and comments use ``{{% ... %}}`` and
``{{!-- ... --}}`` so that ``{%`` and ``{#`` in ordinary file content (shell
``${#ARR[@]}``, Liquid snippets in docs) pass through untouched.
"""

from __future__ import annotations

import re
from typing import Any

from jinja2 import ChainableUndefined, Environment

# A ``{{ ... }}`` expression token with no nested braces.
EXPRESSION_RE = re.compile(r"\{\{([^{}]+)\}\}")

# Words inside camelCase, PascalCase, kebab-case, snake_case or spaced text.
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*|[0-9]+")


def has_template_tokens(text: str) -> bool:
    """Return ``True`` if *text* contains at least one ``{{ ... }}`` token."""
    return EXPRESSION_RE.search(text) is not None


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template strings with an answers context.

    Undefined names (and attribute lookups on them) render as empty strings
    and output is never HTML-escaped, so generated source files come out
    verbatim.
    """

    def __init__(self) -> None:
        self.env = Environment(
            block_start_string="{{%",
            block_end_string="%}}",
            comment_start_string="{{!--",
            comment_end_string="--}}",
            autoescape=False,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
            enable_async=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    async def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Raises:
            jinja2.TemplateError: On syntax errors.
            Exception: Whatever an expression or filter raises while
                evaluating (``TypeError``, ``ZeroDivisionError``, ...).
        """
        template = self.env.from_string(template_string)
        return await template.render_async(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _words(value: Any) -> list[str]:
    return _WORD_RE.findall(str(value))


def _slugify_filter(value: str) -> str:
    """``My Cool App!`` -> ``my-cool-app``."""
    return "-".join(word.lower() for word in _words(value))


def _pascal_case_filter(value: str) -> str:
    """``my-app``, ``my_app`` or ``myApp`` -> ``MyApp``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(value))


def _snake_case_filter(value: str) -> str:
    """``MyApp`` or ``my-app`` -> ``my_app``."""
    return "_".join(word.lower() for word in _words(value))


def _camel_case_filter(value: str) -> str:
    """``my-app`` -> ``myApp``."""
    pascal = _pascal_case_filter(value)
    return pascal[:1].lower() + pascal[1:]
