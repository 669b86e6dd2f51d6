import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from shared.logging import _serialize_game_values, build_processors, game_log_context, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture(autouse=True)
def _allow_file_logging():
    """Disable the _is_test guard so logging tests can create real file handlers."""
    with patch("shared.logging._is_test", return_value=False):
        yield


@pytest.fixture(autouse=True)
def _default_env(monkeypatch):
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "city"
        setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_name_has_prefix_and_datetime(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            default_path = setup_logging(log_dir=tmp_path / "a")
            custom_path = setup_logging(log_dir=tmp_path / "b", prefix="simulate")

        assert default_path is not None
        assert default_path.name == "city_2025-03-15_10-30-45.log"
        assert custom_path is not None
        assert custom_path.name == "simulate_2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_no_file_handler_under_pytest_guard(self, tmp_path):
        with patch("shared.logging._is_test", return_value=True):
            result = setup_logging(log_dir=tmp_path / "city")

        assert result is None
        assert not (tmp_path / "city").exists()

    def test_writes_to_file(self, tmp_path):
        log_path = setup_logging(log_dir=tmp_path / "city")

        structlog.get_logger("test.writes_to_file").info("round scored", score=7)

        assert log_path is not None
        assert "round scored" in log_path.read_text()

    def test_creates_nested_log_directory(self, tmp_path):
        log_dir = tmp_path / "nested" / "dir"
        log_path = setup_logging(log_dir=log_dir)

        assert log_dir.exists()
        assert log_path is not None

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "invalid_value")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()

    def test_json_mode_flattens_game_values(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "city")

        with game_log_context(seed=42):
            structlog.get_logger("test.json").info(
                "round scored",
                dice=(3, 4),
                scoring_cells=frozenset({(2, 3), (2, 2)}),
            )

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "round scored"
        assert parsed["seed"] == 42
        assert parsed["dice"] == [3, 4]
        assert parsed["scoring_cells"] == [[2, 2], [2, 3]]


class TestGameLogContext:
    def test_binds_only_inside_the_block(self):
        with game_log_context(seed=7, strategy="first_legal"):
            assert structlog.contextvars.get_contextvars() == {"seed": 7, "strategy": "first_legal"}
        assert structlog.contextvars.get_contextvars() == {}


class TestBuildProcessors:
    def test_serializer_is_optional(self):
        assert _serialize_game_values in build_processors()
        assert _serialize_game_values not in build_processors(serialize=False)

    def test_ends_with_formatter_wrapper(self):
        assert build_processors()[-1] is structlog.stdlib.ProcessorFormatter.wrap_for_formatter


class TestSerializeGameValues:
    class _Building(Enum):
        HOUSE = "house"
        LAKE = "lake"

    def test_replaces_enum_with_value(self):
        result = _serialize_game_values(None, "", {"building": self._Building.HOUSE, "msg": "hello"})
        assert result == {"building": "house", "msg": "hello"}

    def test_replaces_enum_keys_and_values_in_dicts(self):
        result = _serialize_game_values(None, "", {"bonus": {3: self._Building.LAKE}})
        assert result["bonus"] == {3: "lake"}

    def test_flattens_sequences(self):
        result = _serialize_game_values(None, "", {"available": (self._Building.HOUSE, self._Building.LAKE)})
        assert result["available"] == ["house", "lake"]

    def test_sorts_sets(self):
        result = _serialize_game_values(None, "", {"columns": frozenset({3, 1})})
        assert result["columns"] == [1, 3]

    def test_leaves_plain_values_unchanged(self):
        result = _serialize_game_values(None, "", {"count": 42, "name": "test", "row": None})
        assert result == {"count": 42, "name": "test", "row": None}
