"""Block location tests for suite and test declarations."""

from __future__ import annotations

import pytest

from annodoc.extract import (
    DEFAULT_SUITE_CALLS,
    DEFAULT_TEST_CALLS,
    BlockNotFound,
    first_block,
    locate_named_block,
    next_call_site,
)
from tests._fixtures.specs import APP_SPEC


def test_first_block_reads_title_options_and_body() -> None:
    block = first_block(APP_SPEC, DEFAULT_SUITE_CALLS)
    assert block.keyword == "test.describe"
    assert block.title == "Angular App E2E Tests"
    assert block.options.startswith("{") and "tag: '@feature1'" in block.options
    assert "test('displays welcome message'" in block.body
    assert APP_SPEC[block.body_start] == "{"
    assert APP_SPEC[block.body_end] == "}"


def test_test_body_skips_destructured_parameters() -> None:
    block = locate_named_block(APP_SPEC, DEFAULT_TEST_CALLS, "displays welcome message")
    assert block.body.lstrip().startswith("test.info().annotations.push(")
    assert "{ page }" not in block.body


def test_braces_inside_titles_and_strings_do_not_break_boundaries() -> None:
    text = (
        "test.describe('weird { suite', () => {\n"
        "  test('first }', async () => {\n"
        "    const s = '}}}';\n"
        "  });\n"
        "  test('second', async () => {});\n"
        "});\n"
    )
    suite = first_block(text, DEFAULT_SUITE_CALLS)
    assert suite.title == "weird { suite"
    assert suite.end == text.rindex(")") + 1

    first = locate_named_block(text, DEFAULT_TEST_CALLS, "first }", suite.body_start + 1, suite.body_end)
    assert "'}}}'" in first.body
    second = locate_named_block(text, DEFAULT_TEST_CALLS, "second", first.end, suite.body_end)
    assert second.body == ""


def test_call_sites_inside_comments_and_strings_are_ignored() -> None:
    text = (
        "// test.describe('commented', () => {})\n"
        "const label = \"test.describe('quoted', () => {})\";\n"
        "test.describe.serial('real', () => {});\n"
    )
    block = first_block(text, DEFAULT_SUITE_CALLS)
    assert block.title == "real"
    assert block.keyword == "test.describe.serial"


def test_member_calls_are_not_registration_calls() -> None:
    text = "page.test('nope', () => {});\nmytest('nope', () => {});\n"
    assert next_call_site(text, DEFAULT_TEST_CALLS) is None


def test_function_callbacks_are_supported() -> None:
    text = "test('legacy', async function ({ page }) {\n  await page.goto('/');\n});\n"
    block = first_block(text, DEFAULT_TEST_CALLS)
    assert block.body.strip() == "await page.goto('/');"


def test_template_titles_are_read_verbatim() -> None:
    text = "test(`dyn ${name}`, () => {});\ntest('static', () => {});\n"
    block = first_block(text, DEFAULT_TEST_CALLS)
    assert block.title == "dyn ${name}"


def test_missing_block_raises_block_not_found() -> None:
    with pytest.raises(BlockNotFound, match="titled 'absent'"):
        locate_named_block(APP_SPEC, DEFAULT_TEST_CALLS, "absent")


def test_unclosed_body_is_skipped() -> None:
    text = "test.describe('broken', () => {\n  test('x', () => {\n"
    with pytest.raises(BlockNotFound):
        first_block(text, DEFAULT_SUITE_CALLS)
