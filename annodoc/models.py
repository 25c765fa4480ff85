"""Core data models shared across annodoc components."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class SourceFile:
    """A test spec file read once from disk."""

    path: str
    text: str


@dataclass(frozen=True)
class Annotation:
    """A (type, description) pair attached to a test."""

    type: str
    description: str


@dataclass(frozen=True)
class RuntimeAnnotation:
    """Annotation record reported by the host framework while a test runs."""

    type: str
    description: Optional[str] = None


@dataclass
class TestCase:
    """A single named test and its ordered annotations."""

    __test__ = False

    title: str
    annotations: List[Annotation] = field(default_factory=list)


@dataclass
class Suite:
    """Documentation for one source file: suite metadata plus its tests."""

    name: str
    file_path: str
    tag: str = ""
    description: str = ""
    tests: List[TestCase] = field(default_factory=list)

    def find_test(self, title: str) -> Optional[TestCase]:
        for test in self.tests:
            if test.title == title:
                return test
        return None


@dataclass
class DocumentationModel:
    """Mapping from source file path to its documented suite."""

    entries: Dict[str, Suite] = field(default_factory=dict)

    def add(self, suite: Suite) -> None:
        self.entries[suite.file_path] = suite

    def get(self, file_path: str) -> Optional[Suite]:
        return self.entries.get(file_path)

    def suites(self) -> List[Suite]:
        return list(self.entries.values())

    def test_count(self) -> int:
        return sum(len(suite.tests) for suite in self.entries.values())

    def __iter__(self) -> Iterator[Suite]:
        return iter(list(self.entries.values()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, file_path: object) -> bool:
        return file_path in self.entries


@dataclass
class TestNode:
    """A test as discovered by the host framework."""

    __test__ = False

    title: str
    file: str


@dataclass
class SuiteNode:
    """A suite in the host framework's discovery tree."""

    title: str
    file: Optional[str] = None
    tests: List[TestNode] = field(default_factory=list)
    suites: List["SuiteNode"] = field(default_factory=list)
    tag: Optional[str] = None
    description: Optional[str] = None
