import logging
import sys

from helpdesk.config import LOG_LEVEL


def setup_logging(log_level: str = LOG_LEVEL) -> logging.Logger:
    """
    Sets up the application logger with a single stdout handler.
    """
    logger = logging.getLogger("helpdesk")
    if logger.handlers:
        return logger
    logger.setLevel(log_level.upper())

    console_handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    return logger


logger = setup_logging()
