import asyncio
import io
import logging
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from qif_ledger.config import get_settings
from qif_ledger.domain.document import QifDocument
from qif_ledger.logging_config import PACKAGE_LOGGER
from qif_ledger.parsers.qif_reader import read_qif

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def qif_text(*lines: str) -> str:
    """Join QIF lines the way an exported file stores them."""
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers and levels a test left on the package logger."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def sample_qif_path() -> Path:
    return FIXTURES_DIR / "sample.qif"


@pytest.fixture
def parse_lines() -> Callable[..., QifDocument]:
    """Read the given lines as a QIF document."""

    def _parse(*lines: str) -> QifDocument:
        return asyncio.run(read_qif(io.StringIO(qif_text(*lines))))

    return _parse


@pytest.fixture
def write_qif(tmp_path: Path) -> Callable[..., Path]:
    """Write the given lines to a .qif file and return its path."""

    def _write(*lines: str, name: str = "export.qif") -> Path:
        path = tmp_path / name
        path.write_text(qif_text(*lines))
        return path

    return _write
