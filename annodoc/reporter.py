"""Execution-hooked documentation: static baselines overlaid with runtime annotations."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .builder import DocumentationModelBuilder
from .logging import get_logger
from .models import Annotation, DocumentationModel, RuntimeAnnotation, SuiteNode, TestCase
from .render import DocumentWriter, MarkdownRenderer, RunSummary
from .repo_scanner import relative_key

REPORTER_GENERATOR = "Playwright Documentation Reporter"


def merge_runtime_annotations(test: TestCase, records: Iterable[Any]) -> bool:
    """Replace ``test.annotations`` with the runtime records that carry a description.

    Returns True when a replacement happened. With no usable records the
    statically parsed list is left as it is, even when it is empty.
    """
    runtime = [
        Annotation(type=record.type, description=record.description)
        for record in (_coerce_record(item) for item in records)
        if record.description is not None
    ]
    if not runtime:
        return False
    test.annotations = runtime
    return True


def _coerce_record(record: Any) -> RuntimeAnnotation:
    if isinstance(record, RuntimeAnnotation):
        return record
    if isinstance(record, Mapping):
        return RuntimeAnnotation(
            type=str(record.get("type", "")),
            description=_optional_str(record.get("description")),
        )
    if hasattr(record, "type"):
        return RuntimeAnnotation(
            type=str(record.type),
            description=_optional_str(getattr(record, "description", None)),
        )
    raise TypeError(f"Unsupported runtime annotation record: {record!r}")


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


class DocumentationReporter:
    """Receives discovery and completion events from a test host and renders at the end.

    The reporter owns its model. Host objects are only read, never modified.
    """

    def __init__(
        self,
        output_dir: str | Path = "report",
        *,
        root: str | Path = ".",
        builder: DocumentationModelBuilder | None = None,
        renderer: MarkdownRenderer | None = None,
        writer: DocumentWriter | None = None,
        dry_run: bool = False,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.builder = builder or DocumentationModelBuilder()
        self.renderer = renderer or MarkdownRenderer(generator=REPORTER_GENERATOR)
        self.writer = writer or DocumentWriter(Path(output_dir))
        self.dry_run = dry_run
        self.model = DocumentationModel()
        self._baselines: Dict[Tuple[str, str], List[Annotation]] = {}
        self.logger = get_logger("reporter")

    def on_begin(self, suites: Sequence[SuiteNode]) -> DocumentationModel:
        self.model = self.builder.build_from_hierarchy(suites, self.root)
        self._baselines = {
            (suite.file_path, test.title): list(test.annotations)
            for suite in self.model
            for test in suite.tests
        }
        self.logger.info(
            "Collected %d suites with %d tests", len(self.model), self.model.test_count()
        )
        return self.model

    def on_test_end(self, file_path: str | Path, title: str, records: Iterable[Any]) -> bool:
        """Apply one completion event; later events for the same test supersede earlier ones."""
        key = relative_key(file_path, self.root)
        suite = self.model.get(key)
        test = suite.find_test(title) if suite is not None else None
        if test is None:
            self.logger.debug("No documented test %r in %s", title, key)
            return False

        test.annotations = list(self._baselines.get((key, title), []))
        replaced = merge_runtime_annotations(test, records)
        self.logger.debug(
            "Test %r: %s annotations (%d)",
            title,
            "runtime" if replaced else "static",
            len(test.annotations),
        )
        return replaced

    def on_end(self) -> RunSummary:
        summary = self.writer.publish(self.model, self.renderer, dry_run=self.dry_run)
        self.logger.info(
            "Documentation generated in '%s' (%d files)",
            self.writer.output_dir,
            len(summary.documents) if self.dry_run else len(summary.written),
        )
        return summary


__all__ = ["DocumentationReporter", "REPORTER_GENERATOR", "merge_runtime_annotations"]
