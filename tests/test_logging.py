from __future__ import annotations

from loguru import logger

from infrastructure.logging import find_latest_log_file, get_log_directory, init_logging


def test_init_logging_writes_to_directory(tmp_path) -> None:
    log_dir = tmp_path / "logs"
    try:
        init_logging(str(log_dir))
        logger.info("hello from test")
        logger.complete()
    finally:
        logger.remove()

    latest = find_latest_log_file(str(log_dir))
    assert latest is not None
    assert latest.name.startswith("polaroid_")
    assert "hello from test" in latest.read_text(encoding="utf-8")


def test_find_latest_log_file_without_logs(tmp_path) -> None:
    assert find_latest_log_file(str(tmp_path / "absent")) is None
    assert find_latest_log_file(str(tmp_path)) is None


def test_default_log_directory_is_per_user() -> None:
    assert get_log_directory().endswith("logs")
