"""Configuration loading for annodoc (.annodoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .extract.blocks import DEFAULT_SUITE_CALLS, DEFAULT_TEST_CALLS
from .repo_scanner import DEFAULT_PATTERNS

CONFIG_FILENAME = ".annodoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SourceConfig:
    """Which spec files are documented."""

    patterns: List[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Where and how Markdown is written."""

    dir: str = "report"
    generator: Optional[str] = None


@dataclass
class SyntaxConfig:
    """Call names that declare suites and tests."""

    suite_calls: List[str] = field(default_factory=lambda: list(DEFAULT_SUITE_CALLS))
    test_calls: List[str] = field(default_factory=lambda: list(DEFAULT_TEST_CALLS))


@dataclass
class AnnodocConfig:
    """Represents the settings defined in .annodoc.yml."""

    root: Path
    source: SourceConfig = field(default_factory=SourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    syntax: SyntaxConfig = field(default_factory=SyntaxConfig)


def load_config(config_path: Path) -> AnnodocConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AnnodocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source = SourceConfig()
    source_data = _as_dict(data.get("source"))
    if source_data:
        patterns = _as_str_list(source_data.get("patterns"))
        if patterns:
            source.patterns = patterns
        source.exclude_paths = _as_str_list(source_data.get("exclude_paths"))

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        output.dir = _as_str(output_data.get("dir")) or output.dir
        output.generator = _as_str(output_data.get("generator"))

    syntax = SyntaxConfig()
    syntax_data = _as_dict(data.get("syntax"))
    if syntax_data:
        suite_calls = _as_str_list(syntax_data.get("suite_calls"))
        test_calls = _as_str_list(syntax_data.get("test_calls"))
        if suite_calls:
            syntax.suite_calls = suite_calls
        if test_calls:
            syntax.test_calls = test_calls

    return AnnodocConfig(root=root, source=source, output=output, syntax=syntax)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnnodocConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "OutputConfig",
    "SourceConfig",
    "SyntaxConfig",
    "load_config",
]
