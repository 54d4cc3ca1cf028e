import logging
import sys

from pythonjsonlogger import jsonlogger


def setup_logging():
    """
    Configures structured JSON logging for the application.

    Replaces the root logger's handlers with a stdout stream handler using a
    JSON formatter that includes timestamp, level, logger name and message.
    pika's own loggers are capped at WARNING so connection chatter does not
    drown the application output.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    logging.getLogger("pika").setLevel(logging.WARNING)

    return root_logger
