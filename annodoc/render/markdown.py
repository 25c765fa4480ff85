"""Deterministic Markdown rendering of documented suites."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from typing import Callable, Dict, List, Sequence

from ..models import Annotation, Suite, TestCase

DEFAULT_GENERATOR = "Documentation Generator"
PLACEHOLDER = "*No annotations found for this test.*"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MarkdownRenderer:
    """Renders a suite with its test cases grouped into fixed sections."""

    def __init__(self, *, generator: str = DEFAULT_GENERATOR, clock: Clock | None = None) -> None:
        self.generator = generator
        self._clock = clock or _utc_now

    def render(self, suite: Suite) -> str:
        parts: List[str] = [f"# {suite.name}\n\n"]

        if suite.tag:
            parts.append(f"**Tag:** `{suite.tag}`\n\n")

        if suite.description:
            parts.append(f"## Description\n\n{suite.description}\n\n")

        parts.append("## Test Cases\n\n")
        for test in suite.tests:
            parts.append(self._render_test(test))
            parts.append("---\n\n")

        parts.append("---\n\n")
        parts.append(f"*Generated on {format_timestamp(self._clock())} by {self.generator}*\n")
        parts.append(f"*Source file: `{suite.file_path}`*\n")
        return "".join(parts)

    def _render_test(self, test: TestCase) -> str:
        parts: List[str] = [f"### {test.title}\n\n"]
        if not test.annotations:
            parts.append(f"{PLACEHOLDER}\n\n")
            return "".join(parts)

        grouped = _group_by_type(test.annotations)

        features = grouped.get("Feature", [])
        if features:
            parts.append("#### Feature\n\n")
            parts.extend(f"{annotation.description}\n\n" for annotation in features)

        descriptions = grouped.get("Description", [])
        if descriptions:
            parts.append("#### Description\n\n")
            parts.extend(f"{annotation.description}\n\n" for annotation in descriptions)

        steps = grouped.get("Step", [])
        if steps:
            parts.append("#### Steps\n\n")
            parts.extend(
                f"{index}. {annotation.description}\n"
                for index, annotation in enumerate(steps, start=1)
            )
            parts.append("\n")

        expected = grouped.get("Expected", [])
        if expected:
            parts.append("#### Expected Results\n\n")
            parts.extend(f"- {annotation.description}\n" for annotation in expected)
            parts.append("\n")

        # Other annotation types are not rendered.
        return "".join(parts)


def _group_by_type(annotations: Sequence[Annotation]) -> Dict[str, List[Annotation]]:
    grouped: Dict[str, List[Annotation]] = defaultdict(list)
    for annotation in annotations:
        grouped[annotation.type].append(annotation)
    return grouped


def format_timestamp(moment: datetime) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["DEFAULT_GENERATOR", "MarkdownRenderer", "PLACEHOLDER", "format_timestamp"]
