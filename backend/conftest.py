"""Root conftest: load .env.tests and route structlog through stdlib so caplog sees game logs."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import build_processors

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

structlog.configure(
    processors=build_processors(),
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Seeds bound by one autoplayed game must not leak into the next test."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
