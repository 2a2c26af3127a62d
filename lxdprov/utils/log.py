import logging
from typing import Any, Dict, Optional, Union

ROOT_LOGGER = "lxdprov"

LOG_FORMAT = '%(asctime)s | %(levelname)-4s | %(name)-20s | %(message)s'


def format_context(context: Dict[str, Any]) -> str:
    """Render a context dict as a 'key=value | key=value' suffix"""
    return " | ".join(f"{k}={v}" for k, v in context.items())


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Get a logger below the package root

    The single stream handler lives on the package root logger, so module
    loggers propagate to it instead of each printing their own copy.
    """
    root = logging.getLogger(ROOT_LOGGER)

    # Configure only if no handlers are already set
    if not root.handlers:
        root.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
