"""Write rendered suites into an output tree that mirrors the sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List

from ..logging import get_logger
from ..models import DocumentationModel, Suite
from .markdown import MarkdownRenderer


@dataclass
class RunSummary:
    """Outcome of rendering one documentation model."""

    output_dir: Path
    written: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    documents: Dict[str, str] = field(default_factory=dict)
    suites: int = 0
    tests: int = 0
    dry_run: bool = False


class DocumentWriter:
    """Maps suites to ``<output>/<source dir>/<source name>.md`` and writes them."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.logger = get_logger("writer")

    def output_path(self, file_path: str) -> Path:
        relative = PurePosixPath(file_path.replace("\\", "/"))
        directories = [
            part
            for part in relative.parent.parts
            if part not in ("", ".", "..", "/") and not part.endswith(":")
        ]
        return self.output_dir.joinpath(*directories, f"{relative.stem}.md")

    def write(self, suite: Suite, content: str) -> Path:
        target = self.output_path(suite.file_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def publish(
        self,
        model: DocumentationModel,
        renderer: MarkdownRenderer,
        *,
        dry_run: bool = False,
    ) -> RunSummary:
        """Render every suite; a failed write only affects that suite's file."""
        summary = RunSummary(
            output_dir=self.output_dir,
            suites=len(model),
            tests=model.test_count(),
            dry_run=dry_run,
        )
        for suite in model:
            content = renderer.render(suite)
            target = self.output_path(suite.file_path)
            summary.documents[target.as_posix()] = content
            if dry_run:
                continue
            try:
                self.write(suite, content)
            except OSError as exc:
                self.logger.error("Failed to write documentation for %s: %s", suite.file_path, exc)
                summary.failed.append(suite.file_path)
                continue
            self.logger.info("Generated: %s", target)
            summary.written.append(target)
        return summary


__all__ = ["DocumentWriter", "RunSummary"]
