"""Pipeline orchestration for generate/report flows."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .builder import DocumentationModelBuilder
from .config import AnnodocConfig, load_config
from .logging import get_logger
from .render import DEFAULT_GENERATOR, DocumentWriter, MarkdownRenderer, RunSummary
from .render.markdown import Clock
from .reporter import REPORTER_GENERATOR, DocumentationReporter
from .repo_scanner import SpecFileScanner, relative_key
from .results import load_results


class Orchestrator:
    """Coordinates discovery, extraction and rendering for one run."""

    def __init__(
        self,
        scanner: SpecFileScanner | None = None,
        builder: DocumentationModelBuilder | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.scanner = scanner or SpecFileScanner()
        self._builder = builder
        self.clock = clock
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str | Path = ".",
        *,
        output_dir: str | Path | None = None,
        patterns: Optional[Sequence[str]] = None,
        dry_run: bool = False,
    ) -> RunSummary:
        """Document every spec file under ``path`` from its source alone."""
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Source root {root} does not exist")
        self.logger.info("Starting generate run for %s", root)

        config = load_config(root)
        builder = self._resolve_builder(config)
        active_patterns = list(patterns) if patterns else config.source.patterns
        discovered = self.scanner.discover(root, active_patterns, config.source.exclude_paths)
        self.logger.debug("Scanner discovered %d files", len(discovered))

        model = builder.build_from_paths(root, discovered)
        writer = DocumentWriter(self._output_dir(config, output_dir))
        renderer = MarkdownRenderer(
            generator=config.output.generator or DEFAULT_GENERATOR, clock=self.clock
        )
        summary = writer.publish(model, renderer, dry_run=dry_run)
        summary.skipped = [
            key for key in (relative_key(item, root) for item in discovered) if key not in model
        ]
        self._log_summary(summary)
        return summary

    def run_report(
        self,
        results_path: str | Path,
        *,
        root: str | Path | None = None,
        output_dir: str | Path | None = None,
        dry_run: bool = False,
    ) -> RunSummary:
        """Replay a Playwright JSON report through the documentation reporter."""
        results_file = Path(results_path).expanduser().resolve()
        if not results_file.exists():
            raise FileNotFoundError(f"Results file {results_file} does not exist")

        results = load_results(results_file, Path(root).expanduser() if root else None)
        config = load_config(results.root)
        self.logger.info(
            "Starting report run for %s (%d test results)", results.root, len(results.outcomes)
        )

        reporter = DocumentationReporter(
            self._output_dir(config, output_dir),
            root=results.root,
            builder=self._resolve_builder(config),
            renderer=MarkdownRenderer(
                generator=config.output.generator or REPORTER_GENERATOR, clock=self.clock
            ),
            dry_run=dry_run,
        )
        reporter.on_begin(results.suites)
        for outcome in results.outcomes:
            reporter.on_test_end(outcome.file, outcome.title, outcome.annotations)
        summary = reporter.on_end()
        self._log_summary(summary)
        return summary

    def _resolve_builder(self, config: AnnodocConfig) -> DocumentationModelBuilder:
        if self._builder is not None:
            return self._builder
        return DocumentationModelBuilder(
            self.scanner,
            suite_calls=config.syntax.suite_calls,
            test_calls=config.syntax.test_calls,
        )

    @staticmethod
    def _output_dir(config: AnnodocConfig, override: str | Path | None) -> Path:
        if override is not None:
            return Path(override).expanduser().resolve()
        return config.root / config.output.dir

    def _log_summary(self, summary: RunSummary) -> None:
        if summary.suites == 0:
            self.logger.info("No documented suites found; nothing written")
            return
        self.logger.info(
            "Documented %d suites (%d tests)%s; %d skipped, %d failed",
            summary.suites,
            summary.tests,
            " (dry-run)" if summary.dry_run else "",
            len(summary.skipped),
            len(summary.failed),
        )


__all__ = ["Orchestrator"]
