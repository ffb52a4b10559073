import asyncio
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from pageobject.utils import logger as logger_mod
from pageobject.utils.config import LogLevel, Settings, get_settings
from pageobject.utils.timing import Stopwatch, format_duration, measure


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.DEFAULT_LOCATE_STRATEGY == "css selector"
    assert s.ELEMENT_TIMEOUT_MS == 5000
    assert s.ASYNC_TESTCASE is False
    assert s.LOG_LEVEL == LogLevel.INFO
    assert s.PAGE_OBJECTS_DIR.is_absolute()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PAGEOBJECT_ELEMENT_TIMEOUT_MS", "2500")
    monkeypatch.setenv("PAGEOBJECT_DEFAULT_LOCATE_STRATEGY", " XPath ")
    monkeypatch.setenv("PAGEOBJECT_ASYNC_TESTCASE", "true")

    get_settings.cache_clear()
    try:
        s = get_settings()
        assert s.ELEMENT_TIMEOUT_MS == 2500
        assert s.DEFAULT_LOCATE_STRATEGY == "xpath"
        assert s.ASYNC_TESTCASE is True
        assert get_settings() is s
    finally:
        get_settings.cache_clear()


@pytest.mark.parametrize("strategy", ["recursion", "id", "by magic"])
def test_unsupported_default_strategy(strategy):
    with pytest.raises(ValidationError):
        Settings(DEFAULT_LOCATE_STRATEGY=strategy)


def test_relative_paths_are_absolutized(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    s = Settings(PAGE_OBJECTS_DIR=Path("po"), LOG_FILE=Path("logs/run.log"))
    assert s.PAGE_OBJECTS_DIR == tmp_path / "po"
    assert s.LOG_FILE == tmp_path / "logs" / "run.log"


def test_bind_and_log_with_context():
    log = logger_mod.get_logger("pageobject.tests")
    logger_mod.bind(test="test_bind")
    try:
        scoped = logger_mod.log_with_context(log, command="click")
        _, kwargs = scoped.process("dispatching", {})
        assert kwargs["extra"]["context"] == {"test": "test_bind", "command": "click"}
    finally:
        logger_mod.unbind("test")

    _, kwargs = log.process("dispatching", {})
    assert kwargs["extra"]["context"] == {}


def test_set_log_level():
    logger_mod.set_log_level("DEBUG")
    try:
        assert logging.getLogger("pageobject").level == logging.DEBUG
    finally:
        logger_mod.set_log_level(LogLevel.INFO)
    assert logging.getLogger("pageobject").level == logging.INFO


def test_json_formatter_merges_context():
    record = logging.LogRecord("pageobject.x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.context = {"command": "click"}
    line = logger_mod.JsonFormatter().format(record)
    assert '"msg": "hello world"' in line
    assert '"command": "click"' in line


def test_measure_keeps_name_and_result():
    @measure("work")
    def work(x):
        return x * 2

    assert work(21) == 42
    assert work.__name__ == "work"


def test_measure_times_awaitables():
    @measure()
    def later(x):
        async def run():
            return x + 1
        return run()

    assert asyncio.run(later(1)) == 2


def test_measure_propagates_errors():
    @measure()
    def broken():
        raise KeyError("nope")

    with pytest.raises(KeyError):
        broken()


def test_stopwatch():
    with Stopwatch() as sw:
        pass
    first = sw.elapsed_ms()
    assert first >= 0
    assert sw.elapsed_ms() == first
    assert format_duration(250) == "250 ms"
    assert format_duration(1500) == "1.500 s"
