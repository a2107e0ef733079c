"""
Watching context logger.

Provides logging interface for watching context with automatic [watch] prefix.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[watch]"


def _log_info(message: str) -> None:
    """Log info message with [watch] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [watch] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [watch] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_watch_start(target: Path, provider_name: str) -> None:
    """Log start of a watch session."""
    _log_info(f"Watching {target.name or target} for changes...")
    _log_debug(f"  Provider: {provider_name}")
    _log_warning("Press Ctrl+C to stop watching")


def log_change_detected(changed: Path, folder: Path) -> None:
    _log_info(f"Change detected in {folder.name}, rebuilding...")
    _log_debug(f"  Changed: {changed}")
