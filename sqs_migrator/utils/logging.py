"""
Logging module for the SQS queue migration tool
"""

import logging
import os
from typing import Any, Optional

LOGGER_NAME = "sqs_migrator"


class EnhancedFormatter(logging.Formatter):
    """
    Custom formatter that supports verbose mode (with module/line context)
    and appends the queue a record refers to when one is attached
    """

    def __init__(
        self,
        fmt=None,
        datefmt=None,
        style="%",
        verbose=False,
        include_queue=False,
    ):
        # Use more detailed format for verbose mode
        if verbose:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
        elif not fmt:
            fmt = "%(asctime)s - %(levelname)s - %(message)s"

        super().__init__(fmt, datefmt, style)
        self.include_queue = include_queue

    def format(self, record):
        result = super().format(record)

        if self.include_queue:
            queue = getattr(record, "queue", None)
            if queue:
                result += f" [queue={queue}]"

        return result


def setup_main_log_file(output_dir: str, verbose: bool = False) -> logging.FileHandler:
    """
    Set up a file handler that receives every record of the run.

    Args:
        output_dir: The output directory path
        verbose: If True, use the detailed verbose format

    Returns:
        The file handler for the main log file
    """
    os.makedirs(output_dir, exist_ok=True)
    log_file = os.path.join(output_dir, "migration.log")

    file_handler = logging.FileHandler(log_file, mode="w")
    file_handler.setLevel(logging.DEBUG)  # Always use DEBUG level for file handlers
    file_handler.setFormatter(EnhancedFormatter(verbose=verbose, include_queue=True))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(file_handler)

    logger.info(f"Main log file created at: {log_file}")
    return file_handler


def setup_logger(
    verbose: bool = False, debug_api: bool = False, output_dir: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return the logger with appropriate formatting.

    Args:
        verbose: If True, set console handler to DEBUG level; otherwise INFO level
        debug_api: If True, route botocore request/response logging to our handlers
        output_dir: Optional output directory for the main log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Clear any existing handlers to prevent duplicate messages
    if logger.handlers:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

    logger.setLevel(logging.DEBUG)  # Always set logger to DEBUG to capture all logs

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(EnhancedFormatter(verbose=verbose))
    logger.addHandler(console_handler)

    if output_dir:
        setup_main_log_file(output_dir, verbose)

    if debug_api:
        # botocore logs every request and response at DEBUG
        botocore_logger = logging.getLogger("botocore")
        botocore_logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            if handler not in botocore_logger.handlers:
                botocore_logger.addHandler(handler)
        logger.info("API debug logging enabled for botocore")

    return logger


def log_with_context(
    level: int, message: str, logger: Optional[logging.Logger] = None, **kwargs: Any
) -> None:
    """
    Log a message with additional context information.

    Args:
        level: The logging level (e.g., logging.INFO)
        message: The log message
        logger: Logger to write to; defaults to the package logger
        **kwargs: Additional context to include in the log record
    """
    exc_info = kwargs.pop("exc_info", None)

    # Filter out None values from kwargs
    extras = {k: v for k, v in kwargs.items() if v is not None}

    target = logger if logger is not None else logging.getLogger(LOGGER_NAME)
    target.log(level, message, exc_info=exc_info, extra=extras)


def get_logger():
    """Get the sqs_migrator logger, creating it with defaults if needed."""
    migrator_logger = logging.getLogger(LOGGER_NAME)
    if not migrator_logger.handlers:
        # If no handlers, set up a basic logger
        migrator_logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(EnhancedFormatter())
        migrator_logger.addHandler(handler)
    return migrator_logger


# Module logger - will be properly initialized when setup_logger is called
logger = get_logger()
