"""Exceptions shared across texdock contexts."""

from pathlib import Path
from typing import List, Optional


class TexdockError(Exception):
    """Base class for errors reported to the operator."""


class FolderNotFoundError(TexdockError, ValueError):
    """Raised when a target folder does not exist."""

    def __init__(self, folder: Path):
        self.folder = folder
        super().__init__(f"Folder does not exist: {folder}")


class SandboxViolationError(TexdockError, ValueError):
    """
    Raised when a folder argument resolves outside the project root.

    Attributes:
        folder: The resolved folder path
        project_root: The sandbox boundary it escaped
    """

    def __init__(self, folder: Path, project_root: Path):
        self.folder = folder
        self.project_root = project_root
        super().__init__(f"Folder must be within project root: {project_root} (got {folder})")


class MissingDependencyError(TexdockError):
    """
    Raised when an external tool required by a command is not installed.

    Attributes:
        tools: Names of the tools that were looked for
        hints: Install instructions shown to the operator
    """

    def __init__(self, message: str, tools: Optional[List[str]] = None, hints: Optional[List[str]] = None):
        self.tools = tools or []
        self.hints = hints or []

        parts = [message]
        if self.hints:
            parts.append("Please install one of them:")
            parts.extend(f"  {hint}" for hint in self.hints)

        super().__init__("\n".join(parts))


class ConfigError(TexdockError, ValueError):
    """Raised when a configuration file is malformed or has unknown keys."""
