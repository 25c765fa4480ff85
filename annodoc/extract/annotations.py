"""Extract ordered annotation records from a test body."""

from __future__ import annotations

import re
from typing import List, Mapping, Optional

from ..logging import get_logger
from ..models import Annotation
from .scanner import (
    UnbalancedDelimiterError,
    find_matching_close,
    iter_code_matches,
    literal_value,
    object_fields,
    split_top_level,
)

ANNOTATION_CALL = re.compile(r"\.\s*annotations\s*\.\s*push\s*\(")

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_REFERENCE = re.compile(r"[A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*")

logger = get_logger("extract.annotations")


def extract_annotations(
    body: str,
    constants: Mapping[str, str],
    *,
    source: Optional[str] = None,
) -> List[Annotation]:
    """Return the annotations registered in ``body``, in source order.

    Each ``.annotations.push(...)`` call is matched with the quote-aware
    scanner and its argument list is walked once, object literal by object
    literal. A description that is not a literal is resolved through
    ``constants``; when that fails the raw expression text is kept.
    """
    annotations: List[Annotation] = []
    calls = 0
    for match in iter_code_matches(body, ANNOTATION_CALL):
        calls += 1
        open_paren = match.end() - 1
        try:
            close_paren = find_matching_close(body, open_paren)
        except UnbalancedDelimiterError:
            logger.info("Unbalanced annotation call%s; ignoring it", _where(source))
            continue
        found = _parse_arguments(body, open_paren + 1, close_paren, constants, source)
        if not found:
            logger.info("Annotation call%s has no parsable annotation objects", _where(source))
        annotations.extend(found)

    if calls == 0:
        logger.info("No annotation calls found%s", _where(source))
    return annotations


def _parse_arguments(
    body: str,
    start: int,
    end: int,
    constants: Mapping[str, str],
    source: Optional[str],
) -> List[Annotation]:
    parsed: List[Annotation] = []
    for arg_start, _ in split_top_level(body, start, end):
        if body[arg_start] != "{":
            continue
        try:
            fields = object_fields(body, arg_start)
        except UnbalancedDelimiterError:
            continue
        annotation = _annotation_from_fields(fields, constants, source)
        if annotation is not None:
            parsed.append(annotation)
    return parsed


def _annotation_from_fields(
    fields: Mapping[str, str],
    constants: Mapping[str, str],
    source: Optional[str],
) -> Optional[Annotation]:
    raw_type = fields.get("type")
    raw_description = fields.get("description")
    if raw_type is None or raw_description is None:
        return None
    annotation_type = _resolve_type(raw_type)
    if not annotation_type:
        return None
    description = _resolve_description(raw_description, constants, source)
    return Annotation(type=annotation_type, description=description)


def _resolve_type(raw: str) -> Optional[str]:
    literal = literal_value(raw)
    if literal is not None:
        return literal
    if _REFERENCE.fullmatch(raw):
        return raw.rsplit(".", 1)[-1].strip()
    return None


def _resolve_description(
    raw: str,
    constants: Mapping[str, str],
    source: Optional[str],
) -> str:
    literal = literal_value(raw)
    if literal is not None:
        return literal
    if _IDENTIFIER.fullmatch(raw) and raw in constants:
        return constants[raw]
    logger.warning(
        "Could not resolve description %r%s; using the expression text", raw, _where(source)
    )
    return raw


def _where(source: Optional[str]) -> str:
    return f" in {source}" if source else ""


__all__ = ["ANNOTATION_CALL", "extract_annotations"]
