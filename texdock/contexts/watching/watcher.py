"""
Change-triggered rebuilds

The watch loop: wait for an event from the provider, drop it unless it is a
source file outside ignored directories that still exists, rebuild the
affected folder, then wait again. Events are handled strictly one at a time;
a burst of saves produces one rebuild per relevant event.
"""

from pathlib import Path
from typing import List, Optional

from texdock.config import TexdockConfig
from texdock.contexts.rendering.compiler import CompilationResult, Compiler
from texdock.contexts.watching.logger import _log_debug, log_change_detected, log_watch_start
from texdock.contexts.watching.providers import WatchProvider
from texdock.exceptions import FolderNotFoundError


class Watcher:
    """
    Rebuilds folders when their source files change.

    Args:
        config: Project configuration
        compiler: Compiler used for rebuilds
        provider: Source of filesystem change events
    """

    def __init__(self, config: TexdockConfig, compiler: Compiler, provider: WatchProvider):
        self.config = config
        self.compiler = compiler
        self.provider = provider

    def is_relevant(self, path: Path) -> bool:
        """Check whether a changed path should trigger a rebuild."""
        if not path.name.endswith(self.config.source_suffix):
            return False
        if any(part in self.config.ignored_dirs for part in path.parts):
            return False
        # Deleted or renamed-away files also produce events
        return path.is_file()

    def watch(self, folder: Optional[Path] = None) -> List[CompilationResult]:
        """
        Watch for changes and rebuild until the event stream ends.

        Args:
            folder: Rebuild only this folder on any relevant change under it.
                When None the whole project root is watched and the changed
                file's own directory is rebuilt.

        Returns:
            One CompilationResult per rebuild, in event order

        Raises:
            FolderNotFoundError: If the watched folder does not exist
        """
        target = Path(folder) if folder is not None else self.config.project_root
        if not target.is_dir():
            raise FolderNotFoundError(target)

        log_watch_start(target, self.provider.name)

        results = []
        events = self.provider.events(target)
        try:
            for changed in events:
                if not self.is_relevant(changed):
                    _log_debug(f"Ignoring {changed}")
                    continue

                rebuild_folder = Path(folder) if folder is not None else changed.parent
                log_change_detected(changed, rebuild_folder)
                results.append(self.compiler.compile_folder(rebuild_folder))
        finally:
            events.close()

        return results
