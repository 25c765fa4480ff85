"""Locate suite and test declarations by call signature and balanced braces."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from .scanner import (
    UnbalancedDelimiterError,
    find_matching_close,
    find_top_level,
    iter_code_matches,
    literal_value,
    next_code_char,
    split_top_level,
)

DEFAULT_SUITE_CALLS: Tuple[str, ...] = (
    "test.describe",
    "test.describe.only",
    "test.describe.serial",
    "test.describe.parallel",
    "test.describe.skip",
    "test.describe.fixme",
)

DEFAULT_TEST_CALLS: Tuple[str, ...] = (
    "test",
    "test.only",
    "test.skip",
    "test.fixme",
    "test.fail",
)

_FUNCTION = re.compile(r"(?:async\s+)?function\b")


class BlockNotFound(LookupError):
    """Raised when no declaration matching the requested signature exists."""


class SuiteNotFound(BlockNotFound):
    """Raised when a source file has no recognizable suite declaration."""


class TestBodyNotFound(BlockNotFound):
    """Raised when a named test declaration cannot be located."""

    __test__ = False


@dataclass(frozen=True)
class CallSite:
    """Position of a registration call whose first argument is a quoted literal."""

    keyword: str
    start: int
    open_paren: int


@dataclass(frozen=True)
class BlockSpan:
    """A located declaration: its title, option object and callback body."""

    keyword: str
    title: str
    start: int
    end: int
    options: str
    body_start: int
    body_end: int
    body: str = field(repr=False)


@lru_cache(maxsize=32)
def _call_pattern(keywords: Tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(keywords, key=len, reverse=True)
    alternatives = "|".join(re.escape(keyword) for keyword in ordered)
    return re.compile(rf"(?<![\w$.])({alternatives})\s*\(\s*(?=['\"`])")


def next_call_site(
    text: str,
    keywords: Sequence[str],
    start: int = 0,
    end: Optional[int] = None,
) -> Optional[CallSite]:
    """Return the first call to one of ``keywords`` at or after ``start``."""
    pattern = _call_pattern(tuple(keywords))
    for match in iter_code_matches(text, pattern, start, end):
        open_paren = text.index("(", match.end(1))
        return CallSite(keyword=match.group(1), start=match.start(), open_paren=open_paren)
    return None


def parse_block(text: str, site: CallSite, end: Optional[int] = None) -> BlockSpan:
    """Resolve the title, options and callback body of the call at ``site``."""
    try:
        close_paren = find_matching_close(text, site.open_paren)
    except UnbalancedDelimiterError as exc:
        raise BlockNotFound(f"Unbalanced {site.keyword}() call: {exc}") from exc
    if end is not None and close_paren >= end:
        raise BlockNotFound(f"{site.keyword}() call extends past the enclosing block")

    arguments = split_top_level(text, site.open_paren + 1, close_paren)
    if not arguments:
        raise BlockNotFound(f"{site.keyword}() call has no arguments")
    title = literal_value(text[arguments[0][0] : arguments[0][1]])
    if title is None:
        raise BlockNotFound(f"{site.keyword}() title is not a plain string literal")

    options = ""
    for arg_start, arg_end in arguments[1:]:
        if text[arg_start] == "{":
            options = text[arg_start:arg_end]
            break

    body_open: Optional[int] = None
    for arg_start, arg_end in reversed(arguments[1:]):
        body_open = _callback_body_open(text, arg_start, arg_end)
        if body_open is not None:
            break
    if body_open is None:
        raise BlockNotFound(f"{site.keyword}({title!r}) has no callback block body")

    try:
        body_close = find_matching_close(text, body_open)
    except UnbalancedDelimiterError as exc:
        raise BlockNotFound(f"{site.keyword}({title!r}) body is not closed: {exc}") from exc

    return BlockSpan(
        keyword=site.keyword,
        title=title,
        start=site.start,
        end=close_paren + 1,
        options=options,
        body_start=body_open,
        body_end=body_close,
        body=text[body_open + 1 : body_close],
    )


def _callback_body_open(text: str, start: int, end: int) -> Optional[int]:
    arrow = find_top_level(text, "=>", start, end)
    if arrow != -1:
        brace = next_code_char(text, arrow + 2, end)
        if brace is not None and text[brace] == "{":
            return brace
        return None
    if _FUNCTION.match(text, start):
        params = find_top_level(text, "(", start, end)
        if params == -1:
            return None
        try:
            params_close = find_matching_close(text, params)
        except UnbalancedDelimiterError:
            return None
        brace = find_top_level(text, "{", params_close + 1, end)
        return brace if brace != -1 else None
    return None


def first_block(
    text: str,
    keywords: Sequence[str],
    start: int = 0,
    end: Optional[int] = None,
) -> BlockSpan:
    """Return the first parseable declaration made with one of ``keywords``."""
    return _scan_for(text, keywords, None, start, end)


def locate_named_block(
    text: str,
    keywords: Sequence[str],
    name: str,
    start: int = 0,
    end: Optional[int] = None,
) -> BlockSpan:
    """Return the first declaration whose title literal equals ``name`` exactly."""
    return _scan_for(text, keywords, name, start, end)


def _scan_for(
    text: str,
    keywords: Sequence[str],
    name: Optional[str],
    start: int,
    end: Optional[int],
) -> BlockSpan:
    cursor = start
    while True:
        site = next_call_site(text, keywords, cursor, end)
        if site is None:
            break
        cursor = site.open_paren + 1
        try:
            block = parse_block(text, site, end)
        except BlockNotFound:
            continue
        if name is None or block.title == name:
            return block
    target = f" titled {name!r}" if name is not None else ""
    label = keywords[0] if keywords else "registration"
    raise BlockNotFound(f"No {label}() declaration{target} found")


__all__ = [
    "BlockNotFound",
    "BlockSpan",
    "CallSite",
    "DEFAULT_SUITE_CALLS",
    "DEFAULT_TEST_CALLS",
    "SuiteNotFound",
    "TestBodyNotFound",
    "first_block",
    "locate_named_block",
    "next_call_site",
    "parse_block",
]
