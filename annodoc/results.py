"""Load a Playwright JSON reporter file as discovery and completion events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from .models import RuntimeAnnotation, SuiteNode, TestNode


class ResultsError(RuntimeError):
    """Raised when a results file is not a Playwright JSON report."""


@dataclass
class TestOutcome:
    """One completion event: the test identity and its reported annotations."""

    __test__ = False

    file: str
    title: str
    annotations: List[RuntimeAnnotation] = field(default_factory=list)


@dataclass
class RunResults:
    root: Path
    suites: List[SuiteNode]
    outcomes: List[TestOutcome]


def load_results(path: Path, root: Optional[Path] = None) -> RunResults:
    """Parse ``path`` into the host suite tree plus one outcome per test run.

    File paths in the report are relative to ``config.rootDir``, which becomes
    the root unless ``root`` is given.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except (OSError, ValueError) as exc:
        raise ResultsError(f"Could not read results from {path}: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("suites"), list):
        raise ResultsError(f"{path.name} is not a Playwright JSON report (missing 'suites')")

    if root is None:
        config = payload.get("config")
        root_dir = config.get("rootDir") if isinstance(config, dict) else None
        root = Path(root_dir) if isinstance(root_dir, str) and root_dir else path.parent

    outcomes: List[TestOutcome] = []
    suites: List[SuiteNode] = []
    for raw in payload["suites"]:
        node = _suite_from_payload(raw, None, outcomes)
        if node is not None:
            suites.append(node)
    return RunResults(root=Path(root).expanduser().resolve(), suites=suites, outcomes=outcomes)


def _suite_from_payload(
    raw: Any, parent_file: Optional[str], outcomes: List[TestOutcome]
) -> Optional[SuiteNode]:
    if not isinstance(raw, dict):
        return None
    file = _as_str(raw.get("file")) or parent_file
    node = SuiteNode(title=_as_str(raw.get("title")) or "", file=file)

    for spec in _as_list(raw.get("specs")):
        if not isinstance(spec, dict):
            continue
        title = _as_str(spec.get("title"))
        spec_file = _as_str(spec.get("file")) or file
        if not title or not spec_file:
            continue
        node.tests.append(TestNode(title=title, file=spec_file))
        for test in _as_list(spec.get("tests")):
            if isinstance(test, dict):
                outcomes.append(
                    TestOutcome(file=spec_file, title=title, annotations=_runtime_annotations(test))
                )

    for child in _as_list(raw.get("suites")):
        child_node = _suite_from_payload(child, file, outcomes)
        if child_node is not None:
            node.suites.append(child_node)
    return node


def _runtime_annotations(test: dict) -> List[RuntimeAnnotation]:
    # The last result (final retry) wins; older reports only carry test-level annotations.
    source: Optional[List[Any]] = None
    for result in reversed(_as_list(test.get("results"))):
        if isinstance(result, dict) and isinstance(result.get("annotations"), list):
            source = result["annotations"]
            break
    if source is None:
        source = _as_list(test.get("annotations"))

    records: List[RuntimeAnnotation] = []
    for item in source:
        if not isinstance(item, dict):
            continue
        description = item.get("description")
        records.append(
            RuntimeAnnotation(
                type=str(item.get("type", "")),
                description=None if description is None else str(description),
            )
        )
    return records


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


__all__ = ["ResultsError", "RunResults", "TestOutcome", "load_results"]
