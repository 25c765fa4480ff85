"""Suite-level metadata (tag and description) from a describe options object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from .scanner import UnbalancedDelimiterError, array_items, literal_value, object_fields


@dataclass(frozen=True)
class SuiteMetadata:
    tag: str = ""
    description: str = ""


def extract_suite_metadata(options_text: str) -> SuiteMetadata:
    """Read ``tag`` and ``annotation.description`` from a suite options literal.

    Only quoted literals are honoured; identifiers are not resolved here.
    """
    text = options_text.strip()
    if not text.startswith("{"):
        return SuiteMetadata()
    try:
        fields = object_fields(text, 0)
        return SuiteMetadata(
            tag=_tag(fields.get("tag")),
            description=_annotation_description(fields.get("annotation")),
        )
    except UnbalancedDelimiterError:
        return SuiteMetadata()


def _tag(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    literal = literal_value(raw)
    if literal is not None:
        return literal
    tags: List[str] = []
    for item in array_items(raw):
        value = literal_value(item)
        if value:
            tags.append(value)
    return ", ".join(tags)


def _annotation_description(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    candidates = [raw] if raw.startswith("{") else array_items(raw)
    for candidate in candidates:
        if not candidate.startswith("{"):
            continue
        fields: Mapping[str, str] = object_fields(candidate, 0)
        value = literal_value(fields.get("description"))
        if value:
            return value
    return ""


__all__ = ["SuiteMetadata", "extract_suite_metadata"]
