from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from annodoc.logging import reset_logging
from tests._fixtures.clock import FIXED_NOW
from tests._fixtures.repo_builder import SpecRepoBuilder


@pytest.fixture
def spec_repo(tmp_path: Path) -> SpecRepoBuilder:
    """Provide a reusable spec repository builder rooted at the pytest tmp_path."""
    return SpecRepoBuilder(tmp_path)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def _reset_annodoc_logger() -> Iterator[None]:
    # configure_logging() detaches the logger from root, which hides records from caplog.
    yield
    reset_logging()
