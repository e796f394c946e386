import logging
import sys
from datetime import datetime

from checker.config import LOG_LEVEL


class CompanyFormatter(logging.Formatter):
    """
    Formats records in the project log format:
    [ Tue Jan 06 05:32:41 AM UTC 2026 ] : INFO : root : Message
    """
    def format(self, record):
        dt = datetime.fromtimestamp(record.created)
        timestamp = dt.strftime("%a %b %d %I:%M:%S %p UTC %Y")

        # Either 'root' or the caller-supplied context
        context = getattr(record, "context", "root")

        line = f"[ {timestamp} ] : {record.levelname} : {context} : {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logger(name="checker", log_file=None, level=logging.INFO):
    """Sets up a logger with the project log format."""
    logger = logging.getLogger(name)

    # Child loggers (detection, archive) propagate to the root 'checker' logger
    # and inherit its level
    if name != "checker":
        logger.propagate = True
        setup_logger("checker", log_file=log_file, level=level)
        return logger

    # Avoid duplicate handlers if setup_logger is called multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = CompanyFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Only the root 'checker' logger gets a FileHandler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def attach_log_file(log_file, level=None):
    """Adds a file handler to the root 'checker' logger after startup."""
    logger = logging.getLogger("checker")
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(CompanyFormatter())
    logger.addHandler(file_handler)
    if level is not None:
        logger.setLevel(level)
    return logger


def route_console(stream):
    """Points the console handler at another stream, e.g. stderr when stdout carries JSON."""
    logger = logging.getLogger("checker")
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            handler.setStream(stream)
    return logger


# Global logger instance
logger = setup_logger(level=getattr(logging, LOG_LEVEL, logging.INFO))
