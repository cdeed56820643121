"""
Logging setup for the stdio server.

stdout carries the MCP protocol, so every handler writes to stderr.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any

from rich.console import Console


def get_logging_config(level: str = "INFO") -> dict[str, Any]:
    """Return a dictConfig routing all project logs to a stderr Rich handler.

    Example:
        ```python
        config = get_logging_config("DEBUG")
        ```
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {
                "format": "%(name)s: %(message)s",
                "datefmt": "[%X]",
            }
        },
        "handlers": {
            "stderr": {
                "()": "rich.logging.RichHandler",
                "console": Console(stderr=True),
                "formatter": "rich",
                "rich_tracebacks": True,
                "show_path": False,
            }
        },
        "loggers": {
            "just_mcp": {"handlers": ["stderr"], "level": level, "propagate": False},
            "jmcp": {"handlers": ["stderr"], "level": level, "propagate": False},
            "mcp": {"handlers": ["stderr"], "level": "WARNING", "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["stderr"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the stderr logging configuration.

    Example:
        ```python
        configure_logging("INFO")
        ```
    """
    logging.config.dictConfig(get_logging_config(level))
