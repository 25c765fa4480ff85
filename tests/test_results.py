"""Playwright JSON results loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from annodoc.models import RuntimeAnnotation, TestNode
from annodoc.results import ResultsError, load_results
from tests._fixtures.repo_builder import SpecRepoBuilder
from tests._fixtures.specs import report_payload


def test_load_results_builds_tree_and_outcomes(spec_repo: SpecRepoBuilder) -> None:
    path = spec_repo.write_results(report_payload(spec_repo.path()))

    results = load_results(path)

    assert results.root == spec_repo.path().resolve()
    file_suite = results.suites[0]
    assert file_suite.title == "app.spec.ts" and file_suite.tests == []
    suite = file_suite.suites[0]
    assert suite.title == "Angular App E2E Tests"
    assert suite.tests == [TestNode("displays welcome message", "e2e/app.spec.ts")]

    assert [outcome.annotations for outcome in results.outcomes] == [
        [RuntimeAnnotation("Step", "attempt 2")],
        [RuntimeAnnotation("skip", None)],
    ]


def test_root_falls_back_to_results_directory(spec_repo: SpecRepoBuilder) -> None:
    payload = report_payload(spec_repo.path())
    del payload["config"]
    path = spec_repo.write_results(payload)
    assert load_results(path).root == spec_repo.path().resolve()
    assert load_results(path, root=spec_repo.path() / "e2e").root == (spec_repo.path() / "e2e").resolve()


def test_invalid_reports_raise_results_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ResultsError):
        load_results(broken)

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text('{"stats": {}}', encoding="utf-8")
    with pytest.raises(ResultsError, match="missing 'suites'"):
        load_results(wrong_shape)


def test_missing_report_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_results(tmp_path / "absent.json")
