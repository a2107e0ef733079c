"""
Workspace Context

Responsibilities:
- Discovers buildable folders under the project root
- Resolves folder arguments and enforces the project-root sandbox
- Removes generated build artifacts

Owns: Folder discovery, target resolution, artifact cleanup
Never: Spawns external processes
"""

from texdock.contexts.workspace.cleaner import CleanResult, clean_folder
from texdock.contexts.workspace.discovery import find_source_file, find_tex_folders
from texdock.contexts.workspace.sandbox import is_all_target, resolve_folder

__all__ = [
    "CleanResult",
    "clean_folder",
    "find_source_file",
    "find_tex_folders",
    "is_all_target",
    "resolve_folder",
]
