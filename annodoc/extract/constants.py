"""Collect top-level string constants used to resolve annotation descriptions."""

from __future__ import annotations

import re
from typing import Dict

from .scanner import UnbalancedDelimiterError, iter_code, read_string_literal

_DECLARATION = re.compile(
    r"(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?::[^=;\n]+)?=\s*(?=['\"`])"
)
# Type-only tails that leave the value unchanged.
_TYPE_SUFFIX = re.compile(
    r"(?:as\s+const\b|satisfies\s+[^;\r\n]+?(?=\s*(?:[;,\r\n]|//|/\*|$)))"
)


def build_constant_table(text: str) -> Dict[str, str]:
    """Return ``name -> value`` for top-level declarations bound to a string literal.

    Only declarations at brace depth zero count. Template literals with
    embedded expressions are skipped, as is any literal followed by more of
    the expression (``'a' + b``). A trailing ``as const`` or ``satisfies T``
    does not change the value. Later declarations overwrite earlier ones.
    """
    table: Dict[str, str] = {}
    for index, char, depth in iter_code(text):
        if depth or char not in "clv":
            continue
        if index and (text[index - 1].isalnum() or text[index - 1] in "_$."):
            continue
        match = _DECLARATION.match(text, index)
        if match is None:
            continue
        literal_start = match.end()
        try:
            value, end = read_string_literal(text, literal_start)
        except UnbalancedDelimiterError:
            continue
        if text[literal_start] == "`" and "${" in value:
            continue
        if not _ends_expression(text, end):
            continue
        table[match.group(1)] = value
    return table


def _ends_expression(text: str, index: int) -> bool:
    length = len(text)
    while index < length and text[index] in " \t":
        index += 1
    if index >= length:
        return True
    suffix = _TYPE_SUFFIX.match(text, index)
    if suffix is not None:
        index = suffix.end()
        while index < length and text[index] in " \t":
            index += 1
        if index >= length:
            return True
    if text[index] in ";,\r\n}":
        return True
    return text.startswith(("//", "/*"), index)


__all__ = ["build_constant_table"]
