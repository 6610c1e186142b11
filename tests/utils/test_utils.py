"""Tests for cache and logging helpers."""

import logging
import time

import pytest
from unittest.mock import Mock
from rich.console import Console
from rich.logging import RichHandler

from coverpack.utils.cache import Cache
from coverpack.utils.logger import add_file_handler, configure_logging, get_logger, set_log_level
from coverpack.utils.rich_logger import print_table, setup_logging


class TestCache:
    """Test suite for Cache."""

    def test_get_or_set_calls_factory_once(self):
        cache = Cache()
        factory = Mock(return_value={"layout": 1})

        assert cache.get_or_set("k", factory) == {"layout": 1}
        assert cache.get_or_set("k", factory) == {"layout": 1}
        factory.assert_called_once()

    def test_evicts_oldest(self):
        cache = Cache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert not cache.has("a")
        assert cache.get("c") == 3

    def test_ttl_expiry(self, monkeypatch):
        now = [100.0]
        monkeypatch.setattr(time, "monotonic", lambda: now[0])
        cache = Cache(ttl=5)
        cache.set("a", 1)
        assert cache.get("a") == 1
        now[0] = 106.0
        assert cache.get("a") is None

    def test_clear(self):
        cache = Cache()
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None


class TestLogger:
    """Test suite for logging helpers."""

    def test_get_logger(self):
        assert get_logger("coverpack.test").name == "coverpack.test"
        with pytest.raises(ValueError):
            get_logger("")

    def test_configure_logging_with_file(self, temp_dir):
        log_file = temp_dir / "logs" / "coverpack.log"
        configure_logging("DEBUG", log_file=str(log_file))

        logging.getLogger("coverpack.test").debug("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "hello file" in log_file.read_text()

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging("LOUD")

    def test_set_log_level(self):
        configure_logging("INFO")
        set_log_level("ERROR")
        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert all(handler.level == logging.ERROR for handler in root.handlers)

    def test_add_file_handler_requires_path(self):
        with pytest.raises(ValueError):
            add_file_handler(logging.getLogger("x"), "")


class TestRichLogger:
    """Test suite for rich console helpers."""

    def test_setup_logging_installs_rich_handler(self):
        console = Console(record=True, width=100)
        assert setup_logging("INFO", console=console) is console

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)

        logging.getLogger("coverpack.test").info("rendered cover")
        assert "rendered cover" in console.export_text()

    def test_print_table(self):
        console = Console(record=True, width=100)
        print_table(console, "Template pack", {"min_y": "60 pt"})
        text = console.export_text()
        assert "Template pack" in text
        assert "60 pt" in text
