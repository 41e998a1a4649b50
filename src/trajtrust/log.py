"""Logging setup for the trajtrust logger tree."""

import logging

ROOT_LOGGER = "trajtrust"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """Attach one stream handler to the trajtrust logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        if json_output:
            from pythonjsonlogger.json import JsonFormatter
            formatter = JsonFormatter(
                fmt=PLAIN_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        else:
            formatter = logging.Formatter(PLAIN_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
