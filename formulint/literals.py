"""Scanning and quoting of Ruby string literals used in formula files."""

from __future__ import annotations

import re
from typing import List, Tuple

from .models import Argument

# Typographic and full-width quotation marks editors like to substitute.
NON_ASCII_QUOTES = frozenset("“”„‟‘’‚‛«»「」『』＂＇")

_BARE_TOKEN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.:]*$|^\d+$")


class LiteralError(ValueError):
    """Raised when a literal or argument list cannot be read."""


def has_non_ascii_quotes(text: str) -> bool:
    return any(char in NON_ASCII_QUOTES for char in text)


def strip_non_ascii_quotes(text: str) -> str:
    return "".join(char for char in text if char not in NON_ASCII_QUOTES).strip()


def scan_string(text: str, start: int) -> Tuple[str, int]:
    """Read the quoted string starting at ``start`` and return ``(value, end)``.

    Escaped quotes and backslashes are unescaped; any other escape sequence is
    kept verbatim so the value survives a quote/scan cycle unchanged.
    """
    quote = text[start]
    if quote not in {'"', "'"}:
        raise LiteralError("expected a quoted string literal")
    chars: List[str] = []
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            following = text[index + 1]
            if following in {quote, "\\"}:
                chars.append(following)
            else:
                chars.append(char + following)
            index += 2
            continue
        if char == quote:
            return "".join(chars), index + 1
        chars.append(char)
        index += 1
    raise LiteralError("unterminated string literal")


def quote_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def split_arguments(text: str) -> List[Argument]:
    """Split a comma separated Ruby argument list into :class:`Argument` items."""
    arguments: List[Argument] = []
    index = 0
    length = len(text)
    expecting = False
    while True:
        while index < length and text[index].isspace():
            index += 1
        if index >= length or text[index] == "#":
            if expecting:
                raise LiteralError("dangling ',' at end of argument list")
            break
        char = text[index]
        if char in {'"', "'"}:
            value, index = scan_string(text, index)
            arguments.append(Argument(value))
        elif char in NON_ASCII_QUOTES:
            raise LiteralError("uses non-ASCII quotation marks")
        else:
            end = min(
                (found for found in (text.find(",", index), text.find("#", index)) if found != -1),
                default=length,
            )
            token = text[index:end].strip()
            if has_non_ascii_quotes(token):
                raise LiteralError("uses non-ASCII quotation marks")
            if not _BARE_TOKEN.match(token):
                raise LiteralError(f"unsupported expression {token!r}")
            arguments.append(Argument(token, literal=False))
            index = end
        while index < length and text[index].isspace():
            index += 1
        if index < length and text[index] == ",":
            index += 1
            expecting = True
            continue
        if index < length and text[index] != "#":
            raise LiteralError(f"unexpected text {text[index:].strip()!r}")
        expecting = False
        break
    return arguments


__all__ = [
    "NON_ASCII_QUOTES",
    "LiteralError",
    "has_non_ascii_quotes",
    "quote_string",
    "scan_string",
    "split_arguments",
    "strip_non_ascii_quotes",
]
