import logging
import sys
import os
from datetime import datetime

from bugmail.core.config import LOG_DIR

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors each line by level."""

    cyan = "\x1b[36m"
    green = "\x1b[32m"
    yellow = "\x1b[33m"
    red = "\x1b[31m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    COLORS = {
        logging.DEBUG: cyan,
        logging.INFO: green,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelno)
        fmt = f"{color}{LOG_FORMAT}{self.reset}" if color else LOG_FORMAT
        return logging.Formatter(fmt, datefmt=DATE_FORMAT).format(record)


def setup_logging(level=logging.INFO, log_dir: str = LOG_DIR):
    """Console (stderr) + daily file logging for the whole service."""
    root_logger = logging.getLogger()

    # Drop handlers installed by earlier calls or by uvicorn
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter())
    root_logger.addHandler(console_handler)

    os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.FileHandler(
        os.path.join(log_dir, f"bugmail_{datetime.now().strftime('%Y%m%d')}.log")
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)

    for logger_name in ["bugmail", "uvicorn", "uvicorn.error", "uvicorn.access", "main"]:
        l = logging.getLogger(logger_name)
        l.setLevel(level)
        l.propagate = True

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    root_logger.info("Logging initialized (console + %s).", log_dir)
