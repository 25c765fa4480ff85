"""Quote-aware scanning helpers for JavaScript and TypeScript source text.

Nothing here parses the language. The helpers only know enough about string
literals, template literals, regex literals and comments to keep delimiters that
appear inside them from being counted as structure.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Tuple

QUOTES = ("'", '"', "`")

_PAIRS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {"}", ")", "]"}
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")

# A slash after one of these starts a regex literal rather than a division.
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%>~^")
_REGEX_KEYWORDS = frozenset(
    {
        "await",
        "case",
        "delete",
        "do",
        "else",
        "in",
        "new",
        "of",
        "return",
        "throw",
        "typeof",
        "void",
        "yield",
    }
)


class UnbalancedDelimiterError(ValueError):
    """Raised when the text ends before a delimiter or literal is closed."""


def skip_literal(text: str, index: int) -> Optional[int]:
    """Return the index just past a string, regex literal or comment at ``index``.

    Returns ``None`` when none of them starts there. A ``/`` counts as the
    start of a regex literal only where an expression may begin, so ``a / b``
    stays a division.
    """
    char = text[index]
    if char in QUOTES:
        end, _ = _scan_string(text, index)
        return end
    if char == "/" and index + 1 < len(text):
        following = text[index + 1]
        if following == "/":
            newline = text.find("\n", index)
            return len(text) if newline == -1 else newline
        if following == "*":
            close = text.find("*/", index + 2)
            return len(text) if close == -1 else close + 2
        if _regex_may_start(text, index):
            return _scan_regex(text, index)
    return None


def _regex_may_start(text: str, index: int) -> bool:
    position = index - 1
    while position >= 0 and text[position].isspace():
        position -= 1
    if position < 0:
        return True
    previous = text[position]
    if previous in _REGEX_PRECEDERS:
        return True
    if not (previous.isalpha() or previous in "_$"):
        return False
    start = position
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] in "_$"):
        start -= 1
    if start > 0 and text[start - 1] == ".":
        return False
    return text[start : position + 1] in _REGEX_KEYWORDS


def _scan_regex(text: str, index: int) -> Optional[int]:
    position = index + 1
    length = len(text)
    in_class = False
    while position < length:
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == "\n":
            return None
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "/":
            position += 1
            while position < length and text[position].isalpha():
                position += 1
            return position
        position += 1
    return None


def _scan_string(text: str, index: int) -> Tuple[int, bool]:
    quote = text[index]
    position = index + 1
    length = len(text)
    while position < length:
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == quote:
            return position + 1, True
        # Plain quotes cannot span lines; only template literals continue.
        if char == "\n" and quote != "`":
            return position, False
        position += 1
    return length, False


def read_string_literal(text: str, index: int) -> Tuple[str, int]:
    """Return ``(contents, end)`` for the quoted literal starting at ``index``."""
    quote = text[index]
    if quote not in QUOTES:
        raise ValueError(f"No string literal at offset {index}")
    end, closed = _scan_string(text, index)
    if not closed:
        raise UnbalancedDelimiterError(f"Unterminated {quote} literal at offset {index}")
    return _unescape(text[index + 1 : end - 1], quote), end


def _unescape(raw: str, quote: str) -> str:
    if "\\" not in raw:
        return raw

    def _replace(match: re.Match[str]) -> str:
        escaped = match.group(1)
        if escaped == quote or escaped == "\\":
            return escaped
        return match.group(0)

    return re.sub(r"\\(.)", _replace, raw, flags=re.DOTALL)


def find_matching_close(text: str, open_index: int) -> int:
    """Return the index of the delimiter closing the one at ``open_index``.

    Delimiters inside string, template and regex literals or comments are
    ignored. Raises ``UnbalancedDelimiterError`` if the text ends first.
    """
    opener = text[open_index]
    closer = _PAIRS.get(opener)
    if closer is None:
        raise ValueError(f"Unsupported opening delimiter {opener!r} at offset {open_index}")

    depth = 1
    index = open_index + 1
    length = len(text)
    while index < length:
        skipped = skip_literal(text, index)
        if skipped is not None:
            index = skipped
            continue
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
        index += 1
    raise UnbalancedDelimiterError(f"No closing {closer!r} for {opener!r} at offset {open_index}")


@lru_cache(maxsize=64)
def literal_spans(text: str) -> Tuple[Tuple[int, int], ...]:
    """Return ``(start, end)`` spans of every literal and comment in ``text``."""
    spans: List[Tuple[int, int]] = []
    index = 0
    length = len(text)
    while index < length:
        skipped = skip_literal(text, index)
        if skipped is None:
            index += 1
            continue
        spans.append((index, skipped))
        index = max(skipped, index + 1)
    return tuple(spans)


def iter_code_matches(
    text: str, pattern: re.Pattern[str], start: int = 0, end: Optional[int] = None
) -> Iterator[re.Match[str]]:
    """Yield matches of ``pattern`` whose start lies outside literals and comments."""
    spans = literal_spans(text)
    starts = [span_start for span_start, _ in spans]
    stop = len(text) if end is None else min(end, len(text))
    for match in pattern.finditer(text, start, stop):
        position = bisect_right(starts, match.start()) - 1
        if position >= 0 and spans[position][0] <= match.start() < spans[position][1]:
            continue
        yield match


def iter_code(
    text: str, start: int = 0, end: Optional[int] = None
) -> Iterator[Tuple[int, str, int]]:
    """Yield ``(index, char, depth)`` for code characters between ``start`` and ``end``.

    Literals and comments are skipped. An opening delimiter and its matching
    closer are reported at the same depth.
    """
    stop = len(text) if end is None else min(end, len(text))
    depth = 0
    index = start
    while index < stop:
        skipped = skip_literal(text, index)
        if skipped is not None:
            index = skipped
            continue
        char = text[index]
        if char in _PAIRS:
            yield index, char, depth
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
            yield index, char, depth
        else:
            yield index, char, depth
        index += 1


def iter_top_level(text: str, start: int = 0, end: Optional[int] = None) -> Iterator[Tuple[int, str]]:
    for index, char, depth in iter_code(text, start, end):
        if depth == 0:
            yield index, char


def find_top_level(text: str, token: str, start: int = 0, end: Optional[int] = None) -> int:
    """Return the first index of ``token`` at nesting depth zero, or -1."""
    for index, _ in iter_top_level(text, start, end):
        if text.startswith(token, index):
            return index
    return -1


def split_top_level(
    text: str, start: int, end: int, separator: str = ","
) -> List[Tuple[int, int]]:
    """Split ``text[start:end]`` on top-level separators into trimmed spans.

    Empty segments (such as the one after a trailing comma) are dropped.
    """
    raw_segments: List[Tuple[int, int]] = []
    segment_start = start
    for index, char in iter_top_level(text, start, end):
        if char == separator:
            raw_segments.append((segment_start, index))
            segment_start = index + 1
    raw_segments.append((segment_start, end))

    segments: List[Tuple[int, int]] = []
    for segment in raw_segments:
        trimmed = _trim_span(text, *segment)
        if trimmed[1] > trimmed[0]:
            segments.append(trimmed)
    return segments


def _trim_span(text: str, start: int, end: int) -> Tuple[int, int]:
    """Drop surrounding whitespace and comments, keeping string literals intact."""
    first: Optional[int] = None
    last_end = start
    index = start
    while index < end:
        char = text[index]
        if char.isspace():
            index += 1
            continue
        if char == "/" and text.startswith(("//", "/*"), index):
            index = skip_literal(text, index) or index + 1
            continue
        skipped = skip_literal(text, index) if char in QUOTES or char == "/" else None
        literal_end = index + 1 if skipped is None else min(skipped, end)
        if first is None:
            first = index
        last_end = literal_end
        index = literal_end
    if first is None:
        return start, start
    return first, last_end


def next_code_char(text: str, index: int, end: Optional[int] = None) -> Optional[int]:
    """Return the index of the next character that is not whitespace or a comment."""
    stop = len(text) if end is None else min(end, len(text))
    while index < stop:
        char = text[index]
        if char.isspace():
            index += 1
            continue
        if char == "/" and text.startswith(("//", "/*"), index):
            index = skip_literal(text, index) or index + 1
            continue
        return index
    return None


def literal_value(raw: Optional[str]) -> Optional[str]:
    """Return the contents when ``raw`` is exactly one quoted literal, else ``None``."""
    if raw is None:
        return None
    candidate = raw.strip()
    if not candidate or candidate[0] not in QUOTES:
        return None
    try:
        value, end = read_string_literal(candidate, 0)
    except UnbalancedDelimiterError:
        return None
    if candidate[end:].strip():
        return None
    return value


def object_fields(text: str, open_index: int) -> Dict[str, str]:
    """Map each key of the object literal at ``open_index`` to its raw value text.

    Shorthand properties (``{ description }``) map the name to itself. Spread
    elements, methods and computed keys are ignored.
    """
    close = find_matching_close(text, open_index)
    fields: Dict[str, str] = {}
    for start, end in split_top_level(text, open_index + 1, close):
        segment = text[start:end]
        if segment.startswith("..."):
            continue
        colon = find_top_level(text, ":", start, end)
        if colon == -1:
            key = segment.strip()
            if _IDENTIFIER.fullmatch(key):
                fields[key] = key
            continue
        key = _field_key(text[start:colon].strip())
        if key:
            fields[key] = text[colon + 1 : end].strip()
    return fields


def _field_key(raw: str) -> Optional[str]:
    if _IDENTIFIER.fullmatch(raw):
        return raw
    return literal_value(raw)


def array_items(raw: str) -> List[str]:
    """Return the raw text of each element of an array literal."""
    candidate = raw.strip()
    if not candidate.startswith("["):
        return []
    close = find_matching_close(candidate, 0)
    return [candidate[start:end] for start, end in split_top_level(candidate, 1, close)]


def line_of(text: str, index: int) -> int:
    """Return 1-based line number for a character index."""
    return text.count("\n", 0, index) + 1


__all__ = [
    "QUOTES",
    "UnbalancedDelimiterError",
    "array_items",
    "find_matching_close",
    "find_top_level",
    "iter_code",
    "iter_code_matches",
    "iter_top_level",
    "line_of",
    "literal_spans",
    "literal_value",
    "next_code_char",
    "object_fields",
    "read_string_literal",
    "skip_literal",
    "split_top_level",
]
