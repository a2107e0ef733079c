"""
Shared utilities for texdock.

Common functionality used across contexts:
- Logger setup and provenance
"""

from texdock.utils.logger import setup_logger

__all__ = ["setup_logger"]
