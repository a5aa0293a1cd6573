"""
Logging configuration.
"""
import logging
import sys


def setup_logging(level: int = logging.INFO):
    """
    Setup application logging on the standard error stream.
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.
    """
    return logging.getLogger(name)
