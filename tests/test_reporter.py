"""Runtime merge and reporter lifecycle tests."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from annodoc.models import Annotation, RuntimeAnnotation, SuiteNode, TestCase, TestNode
from annodoc.render import MarkdownRenderer
from annodoc.reporter import REPORTER_GENERATOR, DocumentationReporter, merge_runtime_annotations
from tests._fixtures.repo_builder import SpecRepoBuilder
from tests._fixtures.specs import APP2_DESCRIPTION, APP2_SPEC, APP_SPEC


def test_records_with_descriptions_replace_static_list() -> None:
    test = TestCase("t", [Annotation("Step", "static")])
    replaced = merge_runtime_annotations(
        test,
        [
            RuntimeAnnotation("Step", "runtime one"),
            RuntimeAnnotation("skip"),
            {"type": "Expected", "description": "runtime two"},
        ],
    )
    assert replaced is True
    assert test.annotations == [Annotation("Step", "runtime one"), Annotation("Expected", "runtime two")]


def test_records_without_descriptions_keep_static_list() -> None:
    static = [Annotation("Step", "static")]
    test = TestCase("t", list(static))
    assert merge_runtime_annotations(test, [RuntimeAnnotation("skip"), {"type": "fixme"}]) is False
    assert test.annotations == static


def test_empty_records_keep_empty_static_list() -> None:
    test = TestCase("t")
    assert merge_runtime_annotations(test, []) is False
    assert test.annotations == []


def test_attribute_records_are_accepted_and_unknown_records_rejected() -> None:
    test = TestCase("t")
    merge_runtime_annotations(test, [SimpleNamespace(type="Step", description="from object")])
    assert test.annotations == [Annotation("Step", "from object")]
    with pytest.raises(TypeError):
        merge_runtime_annotations(test, [42])


def _nodes() -> list[SuiteNode]:
    return [
        SuiteNode(
            title="Angular App E2E Tests",
            file="e2e/app.spec.ts",
            tests=[TestNode("displays welcome message", "e2e/app.spec.ts")],
        ),
        SuiteNode(
            title="Another section",
            file="e2e/feature-b/app2.spec.ts",
            tests=[TestNode("has title", "e2e/feature-b/app2.spec.ts")],
        ),
    ]


def _reporter(spec_repo: SpecRepoBuilder, fixed_clock, **kwargs) -> DocumentationReporter:
    spec_repo.write({"e2e/app.spec.ts": APP_SPEC, "e2e/feature-b/app2.spec.ts": APP2_SPEC})
    return DocumentationReporter(
        spec_repo.path() / "report",
        root=spec_repo.path(),
        renderer=MarkdownRenderer(generator=REPORTER_GENERATOR, clock=fixed_clock),
        **kwargs,
    )


def test_reporter_lifecycle_writes_merged_documents(spec_repo: SpecRepoBuilder, fixed_clock) -> None:
    reporter = _reporter(spec_repo, fixed_clock)
    nodes = _nodes()
    model = reporter.on_begin(nodes)
    assert model.test_count() == 2

    assert reporter.on_test_end(
        "e2e/app.spec.ts",
        "displays welcome message",
        [RuntimeAnnotation("Step", "Runtime step")],
    )
    assert not reporter.on_test_end("e2e/feature-b/app2.spec.ts", "has title", [])
    summary = reporter.on_end()

    app_doc = spec_repo.path() / "report/e2e/app.spec.md"
    assert summary.written == [app_doc, spec_repo.path() / "report/e2e/feature-b/app2.spec.md"]
    content = app_doc.read_text(encoding="utf-8")
    assert "1. Runtime step" in content
    assert "Navigate to the home page" not in content
    assert f"by {REPORTER_GENERATOR}*" in content
    other = (spec_repo.path() / "report/e2e/feature-b/app2.spec.md").read_text(encoding="utf-8")
    assert APP2_DESCRIPTION in other
    # Host objects are read only.
    assert nodes[0].tests[0] == TestNode("displays welcome message", "e2e/app.spec.ts")


def test_last_completion_event_wins(spec_repo: SpecRepoBuilder, fixed_clock) -> None:
    reporter = _reporter(spec_repo, fixed_clock)
    reporter.on_begin(_nodes())

    reporter.on_test_end("e2e/app.spec.ts", "displays welcome message", [RuntimeAnnotation("Step", "first try")])
    reporter.on_test_end("e2e/app.spec.ts", "displays welcome message", [RuntimeAnnotation("skip")])

    suite = reporter.model.get("e2e/app.spec.ts")
    assert suite is not None
    assert [annotation.type for annotation in suite.tests[0].annotations] == [
        "Description",
        "Step",
        "Expected",
        "Expected",
    ]


def test_absolute_paths_and_unknown_tests(spec_repo: SpecRepoBuilder, fixed_clock) -> None:
    reporter = _reporter(spec_repo, fixed_clock, dry_run=True)
    reporter.on_begin(_nodes())

    absolute = spec_repo.path() / "e2e/feature-b/app2.spec.ts"
    assert reporter.on_test_end(absolute, "has title", [{"type": "Step", "description": "abs"}])
    assert not reporter.on_test_end("e2e/app.spec.ts", "not declared", [RuntimeAnnotation("Step", "x")])
    assert not reporter.on_test_end(Path("e2e/unknown.spec.ts"), "x", [RuntimeAnnotation("Step", "x")])

    summary = reporter.on_end()
    assert summary.written == []
    assert not (spec_repo.path() / "report").exists()
    document = summary.documents[(spec_repo.path() / "report/e2e/feature-b/app2.spec.md").as_posix()]
    assert "1. abs" in document
