import logging

import pytest
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler

from declarg import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.setLevel(level)


def test_cli_mode_uses_rich():
    setup_logging(mode="cli")
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert handlers[0].level == logging.WARNING


def test_json_mode_uses_json_formatter():
    setup_logging(mode="json", console_log_level=logging.INFO)
    handler = logging.getLogger().handlers[0]
    assert isinstance(handler.formatter, JsonFormatter)
    assert handler.level == logging.INFO


def test_mode_from_environment(monkeypatch):
    monkeypatch.setenv("DECLARG_LOG_MODE", "json")
    setup_logging()
    assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)


def test_file_handler(tmp_path):
    log_file = tmp_path / "declarg.log"
    setup_logging(mode="cli", log_filename=str(log_file), json_log_to_file=True)
    handlers = logging.getLogger().handlers
    assert len(handlers) == 2
    file_handler = handlers[1]
    assert isinstance(file_handler, logging.FileHandler)
    assert isinstance(file_handler.formatter, JsonFormatter)
    logging.getLogger("declarg").debug("written")
    file_handler.close()
    assert "written" in log_file.read_text()


def test_invalid_mode():
    with pytest.raises(ValueError):
        setup_logging(mode="xml")
