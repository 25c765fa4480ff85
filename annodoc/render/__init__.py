"""Markdown rendering and output writing."""

from .markdown import DEFAULT_GENERATOR, PLACEHOLDER, MarkdownRenderer, format_timestamp
from .writer import DocumentWriter, RunSummary

__all__ = [
    "DEFAULT_GENERATOR",
    "DocumentWriter",
    "MarkdownRenderer",
    "PLACEHOLDER",
    "RunSummary",
    "format_timestamp",
]
