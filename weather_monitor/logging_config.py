"""Centralized logging configuration."""

import logging


def configure_logging(level: str = "INFO"):
    """Configure a consistent logging format for the entire application."""
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Third-party loggers share the root handler instead of their own
    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "fastapi"):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.propagate = True

    # httpx logs every request at INFO, which would include the appid query param
    logging.getLogger("httpx").setLevel(logging.WARNING)
