"""
Logging Setup Tests: console handler choice, file handler, re-setup.
"""
import logging
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from rich.logging import RichHandler

from xrf.log_setup import setup_logging


@pytest.fixture
def logger_name(request):
    name = f"xrf.test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestConsoleHandler:
    def test_rich_by_default(self, logger_name):
        log = setup_logging(logger_name)
        assert len(log.handlers) == 1
        assert isinstance(log.handlers[0], RichHandler)
        assert log.handlers[0].level == logging.WARNING
        assert log.propagate is False

    def test_plain_stream_handler(self, logger_name, capsys):
        log = setup_logging(logger_name, console_level=logging.INFO, rich_console=False)
        (handler,) = log.handlers
        assert type(handler) is logging.StreamHandler
        log.debug("hidden detail")
        log.info("chunk 3 halted")
        err = capsys.readouterr().err
        assert "| INFO    | chunk 3 halted" in err
        assert "hidden detail" not in err

    def test_setup_replaces_handlers(self, logger_name):
        setup_logging(logger_name)
        log = setup_logging(logger_name, rich_console=False)
        assert len(log.handlers) == 1
        assert not isinstance(log.handlers[0], RichHandler)


class TestFileHandler:
    def test_file_gets_debug(self, logger_name, tmp_path):
        path = tmp_path / "logs" / "run.log"
        log = setup_logging(logger_name, log_file=path)
        assert len(log.handlers) == 2
        log.debug("stack [0]")
        for handler in log.handlers:
            handler.flush()
        text = path.read_text(encoding="utf-8")
        assert "| DEBUG   |" in text
        assert "stack [0]" in text


if __name__ == '__main__':
    pytest.main([__file__, "-v"])
