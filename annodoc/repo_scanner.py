"""Test spec discovery and source loading."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Sequence

from .models import SourceFile

DEFAULT_PATTERNS: tuple[str, ...] = ("e2e/**/*.spec.ts",)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".angular",
    "dist",
    "playwright-report",
    "test-results",
}


class SourceReadError(RuntimeError):
    """Raised when a spec file cannot be read as UTF-8 text."""


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .annodoc.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, exclude_paths: Sequence[str]) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


@lru_cache(maxsize=64)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    parts: List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif char == "*":
            parts.append("[^/]*")
            index += 1
        elif char == "?":
            parts.append("[^/]")
            index += 1
        elif char == "{":
            close = pattern.find("}", index)
            if close == -1:
                parts.append(re.escape(char))
                index += 1
                continue
            options = pattern[index + 1 : close].split(",")
            parts.append("(?:" + "|".join(re.escape(option) for option in options) + ")")
            index = close + 1
        else:
            parts.append(re.escape(char))
            index += 1
    return re.compile("".join(parts) + r"\Z")


def glob_matches(rel_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob where ``**/`` spans zero or more directories."""
    normalized = rel_path.replace("\\", "/")
    cleaned = pattern.replace("\\", "/")
    if cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return _glob_regex(cleaned).match(normalized) is not None


def relative_key(path: str | Path, root: Path) -> str:
    """Return the POSIX path of ``path`` relative to ``root``.

    Relative inputs are taken to be relative to ``root`` already.
    """
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = root / candidate
    try:
        return candidate.resolve().relative_to(root).as_posix()
    except ValueError:
        return Path(os.path.relpath(candidate.resolve(), root)).as_posix()


def read_source(path: Path, root: Path) -> SourceFile:
    """Read a spec file once, keyed by its path relative to ``root``."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Could not read {path}: {exc}") from exc
    return SourceFile(path=relative_key(path, root), text=text)


class SpecFileScanner:
    """Walks a source tree and returns the files matching the configured globs."""

    def discover(
        self,
        root: str | Path,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        exclude_paths: Sequence[str] = (),
    ) -> List[Path]:
        """Return matching files, sorted by relative path."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        rules = _load_ignore_rules(root_path, exclude_paths)
        matched: List[Path] = []
        for path in _iter_files(root_path, rules):
            rel_path = path.relative_to(root_path).as_posix()
            if any(glob_matches(rel_path, pattern) for pattern in patterns):
                matched.append(path)
        return sorted(matched, key=lambda item: item.relative_to(root_path).as_posix())


__all__ = [
    "DEFAULT_PATTERNS",
    "SourceReadError",
    "SpecFileScanner",
    "glob_matches",
    "read_source",
    "relative_key",
]
