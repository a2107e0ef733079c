"""
Target resolution for folder arguments.

Every command taking a [path|all] argument goes through here before any
external process is spawned. The project root is the sandbox boundary.
"""

from pathlib import Path
from typing import Optional

from texdock.exceptions import SandboxViolationError

ALL_TARGET = "all"


def is_all_target(argument: Optional[str]) -> bool:
    """Return True when the argument means "every discovered folder"."""
    return argument is None or argument.strip() in ("", ALL_TARGET)


def is_within(path: Path, project_root: Path) -> bool:
    """Check whether an absolute, resolved path lies at or below the project root."""
    return path == project_root or project_root in path.parents


def resolve_folder(argument: str, project_root: Path) -> Path:
    """
    Resolve a folder argument to an absolute path inside the project root.

    An argument naming an existing directory (relative to the working
    directory, or absolute) is used as given; anything else is taken relative
    to the project root. Symlinks are resolved before the sandbox check.
    The folder is not required to exist.

    Args:
        argument: Folder path from the command line
        project_root: Sandbox boundary

    Returns:
        Resolved folder path

    Raises:
        SandboxViolationError: If the resolved path escapes the project root

    Examples:
        >>> resolve_folder("resume_1pg", Path("/projects/resumes"))
        PosixPath('/projects/resumes/resume_1pg')
        >>> resolve_folder("../elsewhere", Path("/projects/resumes"))
        Traceback (most recent call last):
        ...
        texdock.exceptions.SandboxViolationError: Folder must be within project root: ...
    """
    project_root = Path(project_root).resolve()

    candidate = Path(argument).expanduser()
    if not candidate.is_dir():
        candidate = project_root / candidate

    folder = candidate.resolve()
    if not is_within(folder, project_root):
        raise SandboxViolationError(folder, project_root)

    return folder
