import logging
import os

from pythonjsonlogger import jsonlogger

import settings

LOGGING_MESSAGE_FORMAT = "%(asctime)s %(name)-12s %(levelname)s %(message)s"


def _get_file_handler() -> logging.FileHandler:
    log_dir = os.path.dirname(settings.LOG_FILE_PATH)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.FileHandler(settings.LOG_FILE_PATH)
    file_handler.setLevel(logging.DEBUG)
    return file_handler


def _get_console_handler() -> logging.StreamHandler:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    return console_handler


def _apply_default_formatter(handler: logging.Handler):
    formatter = jsonlogger.JsonFormatter(LOGGING_MESSAGE_FORMAT)
    handler.setFormatter(formatter)


class APILogger:
    def __init__(self, _logger=None):
        self.logger: logging.Logger = _logger

    @classmethod
    def start_logger(cls):
        _logger = logging.getLogger(settings.APPLICATION_NAME)
        _logger.setLevel(logging.DEBUG)
        # uvicorn --reload re-imports modules in the same process
        if not _logger.handlers:
            for handler in (_get_console_handler(), _get_file_handler()):
                _apply_default_formatter(handler)
                _logger.addHandler(handler)
        return cls(_logger=_logger)

    def get(self) -> logging.Logger:
        return self.logger


# Singleton logger, used across the application
api_logger: APILogger = APILogger.start_logger()


def get() -> logging.Logger:
    return api_logger.get()
