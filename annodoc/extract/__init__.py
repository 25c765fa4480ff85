"""Lexical extraction of suites, tests and annotations from spec files."""

from .annotations import extract_annotations
from .blocks import (
    DEFAULT_SUITE_CALLS,
    DEFAULT_TEST_CALLS,
    BlockNotFound,
    BlockSpan,
    SuiteNotFound,
    TestBodyNotFound,
    first_block,
    locate_named_block,
    next_call_site,
    parse_block,
)
from .constants import build_constant_table
from .scanner import UnbalancedDelimiterError, find_matching_close
from .suite_meta import SuiteMetadata, extract_suite_metadata

__all__ = [
    "BlockNotFound",
    "BlockSpan",
    "DEFAULT_SUITE_CALLS",
    "DEFAULT_TEST_CALLS",
    "SuiteMetadata",
    "SuiteNotFound",
    "TestBodyNotFound",
    "UnbalancedDelimiterError",
    "build_constant_table",
    "extract_annotations",
    "extract_suite_metadata",
    "find_matching_close",
    "first_block",
    "locate_named_block",
    "next_call_site",
    "parse_block",
]
