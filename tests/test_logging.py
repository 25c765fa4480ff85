"""Console prefix and file sink behaviour of the annodoc logger."""

from __future__ import annotations

import logging

import pytest

from annodoc.logging import configure_logging, get_logger, reset_logging


def test_console_lines_use_plain_prefix_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()
    get_logger("builder").warning("Skipping %s", "e2e/x.spec.ts")
    get_logger("builder").debug("hidden")

    err = capsys.readouterr().err
    assert "[annodoc] WARNING Skipping e2e/x.spec.ts" in err
    assert "hidden" not in err


def test_verbose_prefix_names_the_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)
    get_logger("extract.annotations").debug("resolved %d", 2)
    get_logger().info("top level")

    err = capsys.readouterr().err
    assert "[annodoc:extract.annotations] DEBUG resolved 2" in err
    assert "[annodoc] INFO top level" in err


def test_reconfiguring_replaces_handlers(tmp_path) -> None:
    configure_logging(log_file=tmp_path / "first.log")
    logger = configure_logging()
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_reset_logging_restores_propagation(tmp_path) -> None:
    configure_logging(verbose=True, log_file=tmp_path / "run.log")

    logger = reset_logging()

    assert logger.handlers == []
    assert logger.propagate is True
    assert logger.level == logging.NOTSET
