"""Tests for formulint.literals."""

from __future__ import annotations

import pytest

from formulint.literals import LiteralError, quote_string, scan_string, split_arguments
from formulint.models import Argument


def test_scan_string_unescapes_quotes_and_backslashes() -> None:
    value, end = scan_string(r'"say \"hi\" \\ now" tail', 0)

    assert value == 'say "hi" \\ now'
    assert end == 19


def test_scan_string_keeps_interpolation_and_other_escapes() -> None:
    value, _ = scan_string(r'"#{bin}/dote\n"', 0)

    assert value == "#{bin}/dote\\n"
    assert scan_string(quote_string(value), 0)[0] == value


def test_scan_string_rejects_unterminated_literal() -> None:
    with pytest.raises(LiteralError, match="unterminated"):
        scan_string('"dote.c', 0)


def test_split_arguments_mixes_expressions_and_strings() -> None:
    arguments = split_arguments(' ENV.cc, "dote.c", "-o", "dote"  # compile')

    assert arguments == [
        Argument("ENV.cc", literal=False),
        Argument("dote.c"),
        Argument("-o"),
        Argument("dote"),
    ]


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ('"dote",', "dangling"),
        ("“dote”", "non-ASCII"),
        ('bin/"dote"', "unsupported expression"),
        ('"dote" "-o"', "unexpected text"),
    ],
)
def test_split_arguments_rejects_malformed_lists(text: str, message: str) -> None:
    with pytest.raises(LiteralError, match=message):
        split_arguments(text)


def test_split_arguments_allows_comment_after_bare_expression() -> None:
    assert split_arguments(" ENV.cc # noop") == [Argument("ENV.cc", literal=False)]
    assert split_arguments(' "dote.c", ENV.cc# trailing') == [
        Argument("dote.c"),
        Argument("ENV.cc", literal=False),
    ]


def test_split_arguments_rejects_comma_before_comment() -> None:
    with pytest.raises(LiteralError, match="dangling"):
        split_arguments(' "dote.c", # more later')
