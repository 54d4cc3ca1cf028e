"""Unit tests for logging setup"""
import logging

from pythonjsonlogger import jsonlogger

from rabbitmq_wiring import setup_logging


def test_setup_logging_installs_json_handler():
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        logger = setup_logging()

        assert logger is root
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
        assert logging.getLogger("pika").level == logging.WARNING
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
