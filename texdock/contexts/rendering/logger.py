"""
Rendering context logger.

Provides logging interface for rendering context with automatic [build] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[build]"


# Wrapper functions with automatic [build] prefix


def _log_info(message: str) -> None:
    """Log info message with [build] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [build] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [build] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [build] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def echo_compiler_line(line: str) -> None:
    """
    Pass one line of compiler output through to the console unchanged.

    Uses opt(raw=True) to bypass the format template so compiler output is not
    prefixed with the level on every line.
    """
    logger.opt(raw=True).info(f"{line}\n")


# High-level rendering-specific logging helpers


def log_compilation_start(folder_name: str, tex_name: str, command: list) -> None:
    """Log start of compilation with context."""
    _log_info(f"Building {folder_name} ({tex_name})...")
    _log_debug(f"  Command: {' '.join(command)}")


def log_compilation_result(
    folder_name: str,
    result,  # CompilationResult
) -> None:
    """
    Log compilation result with diagnostics.

    Args:
        folder_name: Display name of the built folder
        result: CompilationResult from Compiler.compile_folder()
    """
    if result.success:
        _log_success(f"Successfully built {folder_name} ({result.elapsed:.2f}s)")
    else:
        _log_error(f"Failed to build {folder_name}")
        for err in result.errors:
            _log_error(f"  {err}")

    if result.suppressed:
        _log_debug(f"  Hid {result.suppressed} known-harmless warning line(s)")
