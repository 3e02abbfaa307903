"""Low-level shared utilities for the build-support tools."""

from .logging import get_logger, setup_logging, ToolsLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "ToolsLogger",
]
