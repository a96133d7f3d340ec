import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler

FORMATTER = logging.Formatter("%(asctime)s — %(name)s — %(levelname)s — %(message)s")

LOG_DIR = ".logs"
QUIET_LOGGERS = ("boto3", "botocore", "urllib3")


def _with_formatter(handler):
    handler.setFormatter(FORMATTER)
    return handler


def log_level(debug):
    # LOG_LEVEL wins over DEBUG, e.g. LOG_LEVEL=WARNING for cron runs
    name = os.environ.get("LOG_LEVEL", "").upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    return logging.DEBUG if debug else logging.INFO


def quiet_sdk_loggers(level=logging.WARNING):
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(logger_name="sg-ip-sync"):
    """
    Logger writing to stdout; with DEBUG=true outside Lambda it also writes
    a midnight-rotated file under .logs/.
    """
    debug = os.environ.get("DEBUG", default="false").lower() == "true"
    aws_env = os.environ.get("AWS_EXECUTION_ENV", "") != ""

    logger = logging.getLogger(logger_name)
    logger.handlers.clear()
    logger.propagate = False
    logger.addHandler(_with_formatter(logging.StreamHandler(sys.stdout)))

    if debug and not aws_env:
        os.makedirs(LOG_DIR, exist_ok=True)
        path = os.path.join(LOG_DIR, f"{logger_name}.log")
        logger.addHandler(_with_formatter(TimedRotatingFileHandler(path, when="midnight")))

    logger.setLevel(log_level(debug))
    return logger
