"""
Folder Discovery

Locates buildable folders (directories directly holding a .tex source) under
the project root. The search is shallow: files in the root itself are depth 1,
files in its immediate subdirectories are depth 2.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from texdock.contexts.workspace.logger import _log_debug, _log_warning


def _is_source(entry: Path, source_suffix: str) -> bool:
    # Symlinks are not followed, matching `find -type f`
    return entry.name.endswith(source_suffix) and entry.is_file() and not entry.is_symlink()


def find_tex_folders(
    root: Path,
    source_suffix: str = ".tex",
    max_depth: int = 2,
    ignored_dirs: Iterable[str] = (".git",),
) -> List[Path]:
    """
    Find directories that directly contain a source file.

    Args:
        root: Directory to search
        source_suffix: Extension of source files (default: ".tex")
        max_depth: Deepest file level examined (default: 2)
        ignored_dirs: Directory names that are never descended into

    Returns:
        Sorted, deduplicated list of folders (empty if nothing matches)

    Examples:
        >>> find_tex_folders(Path("/projects/resumes"))
        [PosixPath('/projects/resumes/resume_1pg'), PosixPath('/projects/resumes/resume_2pg')]
    """
    ignored = set(ignored_dirs)
    folders = set()

    level = [Path(root)]
    for _ in range(max_depth):
        next_level = []
        for directory in level:
            try:
                entries = sorted(directory.iterdir())
            except OSError as e:
                _log_warning(f"Skipping unreadable directory {directory}: {e}")
                continue

            for entry in entries:
                if entry.is_dir() and not entry.is_symlink():
                    if entry.name not in ignored:
                        next_level.append(entry)
                elif _is_source(entry, source_suffix):
                    folders.add(directory)
        level = next_level

    result = sorted(folders)
    _log_debug(f"Discovered {len(result)} folder(s) with {source_suffix} files under {root}")
    return result


def find_source_file(folder: Path, source_suffix: str = ".tex") -> Optional[Path]:
    """
    Pick the source file to compile in a folder.

    When several source files are present the lexicographically first wins.

    Args:
        folder: Directory to look in (non-recursive)
        source_suffix: Extension of source files (default: ".tex")

    Returns:
        Path to the source file, or None if the folder has none
    """
    candidates = sorted(entry for entry in folder.iterdir() if _is_source(entry, source_suffix))
    if len(candidates) > 1:
        _log_debug(
            f"{len(candidates)} {source_suffix} files in {folder.name}, using {candidates[0].name}"
        )
    return candidates[0] if candidates else None
