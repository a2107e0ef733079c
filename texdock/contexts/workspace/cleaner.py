"""
Build Artifact Cleanup

Deletes generated files (.aux, .log, .pdf, ...) from a folder. Only the folder
itself is examined; subdirectories are left alone. Safe to repeat.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from texdock.contexts.workspace.logger import _log_error, _log_info, log_clean_result


@dataclass
class CleanResult:
    """
    Result of cleaning one folder.

    Attributes:
        folder: Folder that was cleaned
        removed: Artifact files that were deleted
        errors: Problems that stopped or interrupted the cleanup
    """

    folder: Path
    removed: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def removed_any(self) -> bool:
        return bool(self.removed)


def find_artifacts(folder: Path, artifact_extensions: Iterable[str]) -> List[Path]:
    """List regular files directly in folder whose name ends in an artifact extension."""
    extensions = tuple(artifact_extensions)
    return sorted(
        entry
        for entry in folder.iterdir()
        if entry.name.endswith(extensions) and entry.is_file() and not entry.is_symlink()
    )


def clean_folder(folder: Path, artifact_extensions: Iterable[str]) -> CleanResult:
    """
    Remove build artifacts from a folder (non-recursive).

    Args:
        folder: Folder to clean (must exist)
        artifact_extensions: File extensions to delete, e.g. [".aux", ".pdf"]

    Returns:
        CleanResult listing removed files; `removed_any` is False when the
        folder had nothing to clean
    """
    folder = Path(folder)
    result = CleanResult(folder=folder)

    if not folder.is_dir():
        result.errors.append(f"Folder does not exist: {folder}")
        _log_error(result.errors[-1])
        return result

    _log_info(f"Cleaning build artifacts in {folder.name}...")

    for artifact in find_artifacts(folder, artifact_extensions):
        try:
            artifact.unlink()
        except FileNotFoundError:
            # Removed by something else between listing and unlinking
            continue
        except OSError as e:
            result.errors.append(f"Could not remove {artifact.name}: {e}")
            _log_error(result.errors[-1])
            continue
        result.removed.append(artifact)

    log_clean_result(folder.name, result.removed)
    return result
