"""Tests for formulint.models."""

from __future__ import annotations

import pytest

from formulint.models import Argument, InstallStep, SmokeTest, class_name_for, name_from_class


@pytest.mark.parametrize(
    ("name", "class_name"),
    [
        ("dote", "Dote"),
        ("foo-bar", "FooBar"),
        ("foo_bar", "FooBar"),
        ("python@3", "PythonAT3"),
        ("libxml++", "Libxmlxx"),
    ],
)
def test_class_name_for_follows_homebrew_rules(name: str, class_name: str) -> None:
    assert class_name_for(name) == class_name


def test_name_from_class_inverts_simple_names() -> None:
    assert name_from_class("Dote") == "dote"
    assert name_from_class("FooBar") == "foo-bar"
    assert name_from_class("PythonAT3") == "python@3"


def test_compile_step_exposes_inputs_and_output() -> None:
    step = InstallStep(
        "system",
        (
            Argument("ENV.cc", literal=False),
            Argument("-O2"),
            Argument("dote.c"),
            Argument("-o"),
            Argument("dote"),
        ),
    )

    assert step.is_compile is True
    assert step.compiler == "ENV.cc"
    assert step.inputs == ["dote.c"]
    assert step.output == "dote"
    assert step.artifacts == []


def test_compile_step_without_output_defaults_to_a_out() -> None:
    step = InstallStep("system", (Argument("cc"), Argument("dote.c")))

    assert step.is_compile is True
    assert step.output == "a.out"


def test_non_compiler_system_step_is_opaque() -> None:
    step = InstallStep("system", (Argument("make"), Argument("install")))

    assert step.is_compile is False
    assert step.inputs == []
    assert step.output is None


def test_install_step_lists_artifacts() -> None:
    step = InstallStep("install", (Argument("dote"), Argument("dote.1")), directory="bin")

    assert step.artifacts == ["dote", "dote.1"]


def test_smoke_test_binary_strips_bin_prefix() -> None:
    test = SmokeTest(command="#{bin}/dote --version", expected="dote")

    assert test.argv == ["#{bin}/dote", "--version"]
    assert test.binary == "dote"
    assert SmokeTest(command="/usr/local/bin/dote -h", expected="usage").binary == "dote"
