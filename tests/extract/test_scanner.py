"""Quote-aware scanning tests."""

from __future__ import annotations

import pytest

from annodoc.extract.scanner import (
    UnbalancedDelimiterError,
    array_items,
    find_matching_close,
    find_top_level,
    literal_value,
    object_fields,
    read_string_literal,
    split_top_level,
)


def test_find_matching_close_ignores_braces_inside_strings() -> None:
    text = "{ a: '}', b: \"{\", c: `}` }"
    assert find_matching_close(text, 0) == len(text) - 1


def test_find_matching_close_handles_nesting() -> None:
    text = "(a, (b, c), [d]) tail"
    assert find_matching_close(text, 0) == text.index(" tail") - 1
    assert find_matching_close(text, 4) == text.index(")")


def test_find_matching_close_respects_escaped_quotes() -> None:
    text = "{ a: 'it\\'s }' }"
    assert find_matching_close(text, 0) == len(text) - 1


def test_template_literals_span_lines() -> None:
    text = "{ a: `line one }\nline two }` }"
    assert find_matching_close(text, 0) == len(text) - 1


def test_comments_do_not_open_literals() -> None:
    text = "{\n  // don't count this }\n  /* nor { this */\n  x: 1\n}"
    assert find_matching_close(text, 0) == len(text) - 1


def test_regex_literals_do_not_open_strings_or_comments() -> None:
    quoted = "(expect(h1).toHaveText(/it's/), next)"
    assert find_matching_close(quoted, 0) == len(quoted) - 1
    url = "(expect(page).toHaveURL(/https?:\\/\\//), next)"
    assert find_matching_close(url, 0) == len(url) - 1


def test_regex_character_classes_may_hold_slashes() -> None:
    text = "{ re: /[/}]+/gi, after: 1 }"
    assert find_matching_close(text, 0) == len(text) - 1


def test_division_is_not_a_regex() -> None:
    text = "(total / count, items[0] / 2, (a) / b)"
    assert find_matching_close(text, 0) == len(text) - 1
    parts = [text[start:end] for start, end in split_top_level(text, 1, len(text) - 1)]
    assert parts == ["total / count", "items[0] / 2", "(a) / b"]


def test_unbalanced_text_raises() -> None:
    with pytest.raises(UnbalancedDelimiterError):
        find_matching_close("{ a: '}' ", 0)


def test_unsupported_opener_raises_value_error() -> None:
    with pytest.raises(ValueError):
        find_matching_close("x", 0)


def test_read_string_literal_unescapes_quotes_only() -> None:
    value, end = read_string_literal("'it\\'s \\n ok' rest", 0)
    assert value == "it's \\n ok"
    assert end == len("'it\\'s \\n ok'")


def test_read_string_literal_rejects_unterminated_plain_quote() -> None:
    with pytest.raises(UnbalancedDelimiterError):
        read_string_literal("'open\n'", 0)


def test_split_top_level_drops_trailing_empty_segment() -> None:
    text = "a, f(b, c), { d: [1, 2] }, "
    parts = [text[start:end] for start, end in split_top_level(text, 0, len(text))]
    assert parts == ["a", "f(b, c)", "{ d: [1, 2] }"]


def test_find_top_level_skips_nested_tokens() -> None:
    text = "({ a => 1 }) => {}"
    assert find_top_level(text, "=>", 0, len(text)) == text.rindex("=>")


def test_literal_value_requires_a_single_literal() -> None:
    assert literal_value("  'hello'  ") == "hello"
    assert literal_value("'a' + b") is None
    assert literal_value("description") is None
    assert literal_value(None) is None


def test_object_fields_reads_values_and_shorthand() -> None:
    text = "{ type: 'Step', 'quoted': x.y, description, ...rest }"
    assert object_fields(text, 0) == {
        "type": "'Step'",
        "quoted": "x.y",
        "description": "description",
    }


def test_array_items_returns_raw_elements() -> None:
    assert array_items("['@a', '@b',]") == ["'@a'", "'@b'"]
    assert array_items("'@a'") == []
