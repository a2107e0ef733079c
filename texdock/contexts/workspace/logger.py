"""
Workspace context logger.

Provides logging interface for workspace context with automatic [workspace] prefix.
All workspace modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import List

from loguru import logger

CONTEXT_PREFIX = "[workspace]"


def _log_info(message: str) -> None:
    """Log info message with [workspace] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [workspace] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [workspace] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [workspace] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [workspace] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_clean_result(folder_name: str, removed: List[Path]) -> None:
    """Log the outcome of cleaning one folder."""
    if not removed:
        _log_info(f"No build artifacts found in {folder_name}")
        return

    for path in removed:
        _log_debug(f"  Removed: {path.name}")
    _log_success(f"Successfully cleaned {folder_name} ({len(removed)} files)")
