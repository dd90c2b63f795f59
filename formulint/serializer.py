"""Canonical formula text for a validated descriptor."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader

from .literals import quote_string
from .models import Argument, InstallStep, PackageDescriptor, SmokeTest

_TEMPLATE_NAME = "formula.rb.j2"


def render_argument(argument: Argument) -> str:
    return quote_string(argument.value) if argument.literal else argument.value


def render_statement(step: InstallStep) -> str:
    arguments = ", ".join(render_argument(argument) for argument in step.arguments)
    if step.action == "install":
        return f"{step.directory}.install {arguments}"
    return f"{step.action} {arguments}"


def render_assertion(test: SmokeTest) -> str:
    call = quote_string(test.command)
    if test.exit_status is not None:
        call = f"{call}, {test.exit_status}"
    return f"assert_match {quote_string(test.expected)}, shell_output({call})"


class FormulaRenderer:
    """Renders descriptors through ``formula.rb.j2``.

    Parsing the rendered text yields an equal descriptor, and rendering is
    idempotent, so the output doubles as a formatter for valid formulae.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, descriptor: PackageDescriptor) -> str:
        template = self._env.get_template(_TEMPLATE_NAME)
        return template.render(descriptor=descriptor)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["rb_string"] = quote_string
        env.filters["rb_statement"] = render_statement
        env.filters["rb_assertion"] = render_assertion
        return env


def render_descriptor(descriptor: PackageDescriptor) -> str:
    """Render ``descriptor`` with the bundled template."""
    return FormulaRenderer().render(descriptor)


__all__ = [
    "FormulaRenderer",
    "render_argument",
    "render_assertion",
    "render_descriptor",
    "render_statement",
]
