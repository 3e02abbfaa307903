from __future__ import annotations

import logging
from pathlib import Path

from common.base.logging import ROOT_LOGGER_NAME, get_logger, normalize_level, normalize_use_rich, setup_logging
from common.shared.loader import load_logging_config
from common.shared.utils import Progress


def test_normalize_helpers() -> None:
    assert normalize_level("debug") == "DEBUG"
    assert normalize_level(logging.WARNING) == "WARNING"
    assert normalize_level("chatty") == "INFO"
    assert normalize_use_rich("auto") is None
    assert normalize_use_rich("off") is False
    assert normalize_use_rich(True) is True


def test_log_file_written_only_with_log_dir(tmp_path: Path) -> None:
    logger = setup_logging(level="DEBUG", use_rich=False, log_dir=None)
    assert logger.log_file is None

    logger = setup_logging(level="INFO", use_rich=False, log_dir=tmp_path / "logs", file_prefix="unit")
    get_logger("scrub.test").info("hello from a child logger")
    for handler in logger.handlers:
        handler.flush()

    assert logger.log_file is not None
    assert logger.log_file.name.startswith("unit_")
    assert "hello from a child logger" in logger.log_file.read_text(encoding="utf-8")
    setup_logging(level="WARNING", use_rich=False)


def test_child_loggers_hang_off_the_tools_root() -> None:
    assert get_logger("mirror.sync").name == f"{ROOT_LOGGER_NAME}.mirror.sync"
    assert get_logger().name == ROOT_LOGGER_NAME


def test_progress_counts_manual_updates() -> None:
    with Progress(desc="unit", total=2, disable=True) as progress:
        progress.update()
        progress.update()
    progress.close()


def test_default_logging_settings_come_from_repo_config() -> None:
    settings = load_logging_config()
    assert settings.get("file_prefix") == "buildtools"
    assert normalize_level(settings.get("level")) == "INFO"
