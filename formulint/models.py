"""Core data models shared across formulint components."""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

_COMPILER_EXPRESSIONS = {"ENV.cc", "ENV.cxx"}
_COMPILER_COMMANDS = {"cc", "gcc", "clang", "c++", "g++", "clang++"}
_BIN_PREFIX = "#{bin}/"
_CAMEL_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class Argument:
    """One argument of an install statement.

    ``literal`` is False for bare Ruby expressions such as ``ENV.cc``.
    """

    value: str
    literal: bool = True


@dataclass(frozen=True)
class InstallStep:
    """A single statement from a formula's ``install`` block."""

    action: str
    arguments: Tuple[Argument, ...]
    directory: Optional[str] = None

    @property
    def is_compile(self) -> bool:
        if self.action != "system" or not self.arguments:
            return False
        head = self.arguments[0]
        if head.literal:
            return head.value in _COMPILER_COMMANDS
        return head.value in _COMPILER_EXPRESSIONS

    @property
    def compiler(self) -> Optional[str]:
        return self.arguments[0].value if self.is_compile else None

    @property
    def output(self) -> Optional[str]:
        if not self.is_compile:
            return None
        values = [argument.value for argument in self.arguments]
        if "-o" in values:
            position = values.index("-o")
            if position + 1 < len(values):
                return values[position + 1]
        return "a.out"

    @property
    def inputs(self) -> List[str]:
        """Files read by a compile step (non-flag arguments other than the output)."""
        if not self.is_compile:
            return []
        found: List[str] = []
        skip_next = False
        for argument in self.arguments[1:]:
            if skip_next:
                skip_next = False
                continue
            if argument.value == "-o":
                skip_next = True
                continue
            if not argument.literal or argument.value.startswith("-"):
                continue
            found.append(argument.value)
        return found

    @property
    def artifacts(self) -> List[str]:
        if self.action != "install":
            return []
        return [argument.value for argument in self.arguments if argument.literal]


@dataclass(frozen=True)
class SmokeTest:
    """``assert_match expected, shell_output(command)`` from a formula's test block."""

    command: str
    expected: str
    exit_status: Optional[int] = None

    @property
    def argv(self) -> List[str]:
        return shlex.split(self.command)

    @property
    def binary(self) -> Optional[str]:
        argv = self.argv
        if not argv:
            return None
        head = argv[0]
        if head.startswith(_BIN_PREFIX):
            return head[len(_BIN_PREFIX):]
        return head.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class PackageDescriptor:
    """Validated, immutable view of one formula."""

    name: str
    source_url: str
    version: str
    install_steps: Tuple[InstallStep, ...]
    description: Optional[str] = None
    homepage: Optional[str] = None
    checksum: Optional[str] = None
    license: Optional[str] = None
    test: Optional[SmokeTest] = None
    origin: Optional[str] = field(default=None, compare=False)

    @property
    def class_name(self) -> str:
        return class_name_for(self.name)


@dataclass
class TapManifest:
    """Tap-relative paths of the formula files found beneath a tap root."""

    root: str
    files: List[str]


def class_name_for(name: str) -> str:
    """Return the Ruby class name Homebrew expects for formula ``name``."""
    if not name:
        return ""
    converted = name[0].upper() + name[1:].lower()
    converted = re.sub(r"[-_.\s]([a-zA-Z0-9])", lambda match: match.group(1).upper(), converted)
    converted = converted.replace("+", "x")
    return re.sub(r"(.)@(\d)", r"\1AT\2", converted, count=1)


def name_from_class(class_name: str) -> str:
    """Best-effort inverse of :func:`class_name_for`."""
    converted = re.sub(r"(.)AT(\d)", r"\1@\2", class_name, count=1)
    return "-".join(part for part in _CAMEL_PATTERN.split(converted) if part).lower()
