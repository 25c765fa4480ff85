"""Assemble the documentation model from source files or a host suite tree."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .extract import (
    DEFAULT_SUITE_CALLS,
    DEFAULT_TEST_CALLS,
    BlockNotFound,
    BlockSpan,
    SuiteMetadata,
    SuiteNotFound,
    TestBodyNotFound,
    build_constant_table,
    extract_annotations,
    extract_suite_metadata,
    first_block,
    locate_named_block,
    next_call_site,
    parse_block,
)
from .extract.scanner import line_of
from .logging import get_logger
from .models import Annotation, DocumentationModel, SourceFile, Suite, SuiteNode, TestCase
from .repo_scanner import (
    DEFAULT_PATTERNS,
    SourceReadError,
    SpecFileScanner,
    read_source,
    relative_key,
)

SourceReader = Callable[[Path, Path], SourceFile]


@dataclass
class _FileContext:
    suite: Suite
    source: Optional[SourceFile] = None
    block: Optional[BlockSpan] = None
    constants: Dict[str, str] = field(default_factory=dict)


class DocumentationModelBuilder:
    """Builds one ``Suite`` per source file in either static or hooked mode."""

    def __init__(
        self,
        scanner: SpecFileScanner | None = None,
        *,
        suite_calls: Sequence[str] = DEFAULT_SUITE_CALLS,
        test_calls: Sequence[str] = DEFAULT_TEST_CALLS,
        reader: SourceReader = read_source,
    ) -> None:
        self.scanner = scanner or SpecFileScanner()
        self.suite_calls = tuple(suite_calls)
        self.test_calls = tuple(test_calls)
        self.reader = reader
        self.logger = get_logger("builder")

    # Static-scan mode

    def build_static(
        self,
        root: str | Path,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        exclude_paths: Sequence[str] = (),
    ) -> DocumentationModel:
        """Discover files under ``root`` and document each one."""
        root_path = Path(root).expanduser().resolve()
        paths = self.scanner.discover(root_path, patterns, exclude_paths)
        self.logger.debug("Discovered %d spec files under %s", len(paths), root_path)
        return self.build_from_paths(root_path, paths)

    def build_from_paths(self, root: Path, paths: Iterable[Path]) -> DocumentationModel:
        model = DocumentationModel()
        for path in paths:
            try:
                source = self.reader(path, root)
            except SourceReadError as exc:
                self.logger.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            self._add_parsed(model, source)
        return model

    def build_from_sources(self, sources: Iterable[SourceFile]) -> DocumentationModel:
        model = DocumentationModel()
        for source in sources:
            self._add_parsed(model, source)
        return model

    def _add_parsed(self, model: DocumentationModel, source: SourceFile) -> None:
        self.logger.debug("Processing file: %s", source.path)
        try:
            suite = self.parse_source(source)
        except SuiteNotFound as exc:
            self.logger.warning("Skipping %s: %s", source.path, exc)
            return
        model.add(suite)

    def parse_source(self, source: SourceFile) -> Suite:
        """Return the documented suite for ``source`` or raise ``SuiteNotFound``."""
        text = source.text
        try:
            block = first_block(text, self.suite_calls)
        except BlockNotFound as exc:
            raise SuiteNotFound(f"no suite declaration found in {source.path}") from exc

        metadata = extract_suite_metadata(block.options)
        constants = build_constant_table(text)
        suite = Suite(
            name=block.title,
            file_path=source.path,
            tag=metadata.tag,
            description=metadata.description,
            tests=list(self._scan_tests(source, block, constants)),
        )
        self._warn_duplicate_titles(suite)
        self.logger.debug("Suite %r: %d tests", suite.name, len(suite.tests))
        return suite

    def _scan_tests(
        self, source: SourceFile, suite_block: BlockSpan, constants: Dict[str, str]
    ) -> Iterator[TestCase]:
        text = source.text
        cursor = suite_block.body_start + 1
        while True:
            site = next_call_site(text, self.test_calls, cursor, suite_block.body_end)
            if site is None:
                return
            try:
                block = parse_block(text, site, suite_block.body_end)
            except BlockNotFound as exc:
                self.logger.warning(
                    "Skipping unparseable test in %s at line %d: %s",
                    source.path,
                    line_of(text, site.start),
                    exc,
                )
                cursor = site.open_paren + 1
                continue
            annotations = extract_annotations(block.body, constants, source=source.path)
            self.logger.debug("Found test %r with %d annotations", block.title, len(annotations))
            yield TestCase(title=block.title, annotations=annotations)
            cursor = block.end

    def _warn_duplicate_titles(self, suite: Suite) -> None:
        counts = Counter(test.title for test in suite.tests)
        for title, count in counts.items():
            if count > 1:
                self.logger.warning(
                    "Test title %r appears %d times in %s; runtime annotations "
                    "will only reach the first one",
                    title,
                    count,
                    suite.file_path,
                )

    # Execution-hooked mode

    def build_from_hierarchy(
        self, nodes: Sequence[SuiteNode], root: str | Path = "."
    ) -> DocumentationModel:
        """Build the model from the host's suite tree, with static annotation baselines.

        Nested suites collapse into the file's outermost titled suite.
        """
        root_path = Path(root).expanduser().resolve()
        model = DocumentationModel()
        contexts: Dict[str, _FileContext] = {}

        for node in _walk(nodes):
            if not node.file:
                continue
            key = relative_key(node.file, root_path)
            context = contexts.get(key)
            if context is None:
                if _is_file_container(node, key) and not node.tests:
                    continue
                context = self._open_context(node, key, root_path)
                contexts[key] = context
                model.add(context.suite)
            for test in node.tests:
                context.suite.tests.append(
                    TestCase(title=test.title, annotations=self._static_baseline(context, test.title))
                )

        for context in contexts.values():
            self._warn_duplicate_titles(context.suite)
        return model

    def _open_context(self, node: SuiteNode, key: str, root: Path) -> _FileContext:
        container = _is_file_container(node, key)
        context = _FileContext(
            suite=Suite(name=Path(key).name if container else node.title, file_path=key)
        )

        path = Path(node.file or key)
        if not path.is_absolute():
            path = root / path
        try:
            context.source = self.reader(path, root)
        except SourceReadError as exc:
            self.logger.warning("Static annotations unavailable for %s: %s", key, exc)

        metadata = SuiteMetadata()
        if context.source is not None:
            context.constants = build_constant_table(context.source.text)
            if not container:
                try:
                    context.block = locate_named_block(
                        context.source.text, self.suite_calls, node.title
                    )
                except BlockNotFound:
                    self.logger.warning("Could not locate suite %r in %s", node.title, key)
                else:
                    metadata = extract_suite_metadata(context.block.options)

        context.suite.tag = node.tag or metadata.tag
        context.suite.description = node.description or metadata.description
        return context

    def _static_baseline(self, context: _FileContext, title: str) -> List[Annotation]:
        if context.source is None:
            return []
        try:
            block = self._locate_test(context.source.text, context.block, title)
        except TestBodyNotFound as exc:
            self.logger.warning("%s in %s", exc, context.suite.file_path)
            return []
        return extract_annotations(
            block.body, context.constants, source=context.suite.file_path
        )

    def _locate_test(self, text: str, suite_block: Optional[BlockSpan], title: str) -> BlockSpan:
        if suite_block is not None:
            try:
                return locate_named_block(
                    text,
                    self.test_calls,
                    title,
                    suite_block.body_start + 1,
                    suite_block.body_end,
                )
            except BlockNotFound:
                pass
        # Tests from sibling suites collapse into the same file entry.
        try:
            return locate_named_block(text, self.test_calls, title)
        except BlockNotFound as exc:
            raise TestBodyNotFound(f"Could not find test body for {title!r}") from exc


def _walk(nodes: Sequence[SuiteNode]) -> Iterator[SuiteNode]:
    for node in nodes:
        yield node
        yield from _walk(node.suites)


def _is_file_container(node: SuiteNode, key: str) -> bool:
    title = node.title.replace("\\", "/")
    if not title:
        return True
    if node.file and title == node.file.replace("\\", "/"):
        return True
    return key == title or key.endswith(f"/{title}")


__all__ = ["DocumentationModelBuilder"]
