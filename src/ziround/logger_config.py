import logging
import sys
from typing import Optional, TextIO


def setup_logger(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """
    Install a single handler on the root logger.

    Records go to stderr unless ``stream`` says otherwise; stdout is left to
    the stdio transport of the MCP server.
    """
    log_format = "[%(asctime)s] [%(levelname)-8s] [%(module)-15s] - %(message)s"
    logger = logging.getLogger()
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
