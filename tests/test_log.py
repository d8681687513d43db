"""Tests for logging helpers."""

import logging

from swixter.utils.log import StructuredFormatter, SwixterLogger


def test_structured_formatter_appends_extras():
    formatter = StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s")
    record = logging.LogRecord("swixter", logging.INFO, __file__, 1, "saved %s", ("x",), None)
    record.path = "/tmp/providers.json"
    record.provider_count = 2

    line = formatter.format(record)
    assert "[INFO] saved x" in line
    assert line.endswith('| {"path": "/tmp/providers.json", "provider_count": 2}')
    assert "Z [INFO]" in line


def test_file_handler_receives_debug_records(tmp_path):
    logger = SwixterLogger(name="swixter.test_file_handler")
    log_file = logger.attach_file_handler(tmp_path / "logs" / "swixter.log")

    logger.debug("[test] hello", extra={"answer": 42})
    for handler in logger.logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "[DEBUG] [test] hello" in content
    assert '"answer": 42' in content


def test_attaching_same_file_twice_keeps_one_handler(tmp_path):
    logger = SwixterLogger(name="swixter.test_reattach")
    target = tmp_path / "one.log"
    logger.attach_file_handler(target)
    logger.attach_file_handler(target)
    file_handlers = [h for h in logger.logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1


def test_attaching_another_file_replaces_the_handler(tmp_path):
    logger = SwixterLogger(name="swixter.test_replace")
    logger.attach_file_handler(tmp_path / "first.log")
    logger.attach_file_handler(tmp_path / "second.log")

    logger.info("[test] after switch")
    file_handlers = [h for h in logger.logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    file_handlers[0].flush()
    assert "after switch" in (tmp_path / "second.log").read_text(encoding="utf-8")
    assert "after switch" not in (tmp_path / "first.log").read_text(encoding="utf-8")
