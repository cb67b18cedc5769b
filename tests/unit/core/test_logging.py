"""
core/logging.py 테스트

핸들러 구성, 로그 파일 경로, 불필요한 로거 레벨 조정
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Iterator

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLogFilePath:
    def test_web(self) -> None:
        assert get_log_file_path("web") == Paths.WEB_LOGS_DIR / "web.log"

    def test_custom_dir(self, tmp_path: Path) -> None:
        assert get_log_file_path("worker", tmp_path) == tmp_path / "worker.log"


class TestSetupLogging:
    def test_handlers(self, tmp_path: Path, restore_root_logger: None) -> None:
        """콘솔 + 일별 파일 핸들러"""
        root = setup_logging("web", log_dir=tmp_path)

        kinds = {type(h) for h in root.handlers}
        assert TimedRotatingFileHandler in kinds
        assert logging.StreamHandler in kinds
        assert (tmp_path / "web.log").exists()

    def test_repeated_setup_does_not_duplicate(
        self, tmp_path: Path, restore_root_logger: None
    ) -> None:
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_noisy_loggers_lowered(self, tmp_path: Path, restore_root_logger: None) -> None:
        setup_logging("web", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
