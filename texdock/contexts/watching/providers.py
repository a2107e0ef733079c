"""
Filesystem-change providers

A provider wraps an external watch utility that prints one changed path per
line on stdout. Providers are probed in DEFAULT_PROVIDERS order and the first
one installed is used; adding a new provider means appending a subclass to
that list.
"""

import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Type

from texdock.config import TexdockConfig
from texdock.contexts.watching.logger import _log_debug
from texdock.exceptions import MissingDependencyError


class WatchProvider(ABC):
    """
    Capability interface for an external watch utility.

    Subclasses set `name`, `executable` and `install_hint` and implement
    `command()`. The rest of texdock only calls `is_available()` and `events()`.
    """

    name: str = ""
    executable: str = ""
    install_hint: str = ""

    def __init__(
        self,
        config: TexdockConfig,
        popen: Optional[Callable[..., subprocess.Popen]] = None,
    ):
        self.config = config
        self._popen = popen or subprocess.Popen

    def is_available(self) -> bool:
        """Return True if the utility is on PATH."""
        return shutil.which(self.executable) is not None

    @abstractmethod
    def command(self, path: Path) -> List[str]:
        """Argument list that watches `path` recursively."""

    def events(self, path: Path) -> Iterator[Path]:
        """
        Yield changed paths reported by the utility, one at a time.

        Blocks between events. The utility process is terminated when the
        iterator is closed or garbage collected.

        Args:
            path: Directory to watch recursively

        Yields:
            Paths of changed files, exactly as reported
        """
        cmd = self.command(path)
        _log_debug(f"Starting {self.name}: {' '.join(cmd)}")

        process = self._popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            bufsize=1,
        )
        try:
            for raw_line in process.stdout:
                line = raw_line.rstrip("\n")
                if line:
                    yield Path(line)
        finally:
            if process.poll() is None:
                process.terminate()
                process.wait()
            _log_debug(f"Stopped {self.name}")


class FswatchProvider(WatchProvider):
    """fswatch, usually found on macOS."""

    name = "fswatch"
    executable = "fswatch"
    install_hint = "macOS: brew install fswatch"

    def command(self, path: Path) -> List[str]:
        cmd = [
            self.executable,
            "-r",
            str(path),
            f"--include=.*{re.escape(self.config.source_suffix)}$",
        ]
        for ignored in self.config.ignored_dirs:
            cmd.append(f"--exclude=.*/{re.escape(ignored)}/.*")
        return cmd


class InotifywaitProvider(WatchProvider):
    """inotifywait from inotify-tools, usually found on Linux."""

    name = "inotifywait"
    executable = "inotifywait"
    install_hint = "Linux: sudo apt-get install inotify-tools"

    # close_write and moved_to cover editors that save in place or via rename
    EVENTS = "close_write,moved_to,create,delete"

    def exclude_pattern(self) -> str:
        """Extended regex skipping ignored directories and build artifacts."""
        dirs = "|".join(re.escape(name) for name in self.config.ignored_dirs)
        extensions = "|".join(re.escape(ext) for ext in self.config.artifact_extensions)
        parts = []
        if dirs:
            parts.append(f"/({dirs})(/|$)")
        if extensions:
            parts.append(f"({extensions})$")
        return "|".join(parts)

    def command(self, path: Path) -> List[str]:
        cmd = [self.executable, "-m", "-r", "-q", "-e", self.EVENTS]
        exclude = self.exclude_pattern()
        if exclude:
            cmd += ["--exclude", exclude]
        cmd += ["--format", "%w%f", str(path)]
        return cmd


DEFAULT_PROVIDERS: List[Type[WatchProvider]] = [FswatchProvider, InotifywaitProvider]


def select_provider(
    config: TexdockConfig,
    providers: Optional[Sequence[Type[WatchProvider]]] = None,
) -> WatchProvider:
    """
    Return the first installed watch provider.

    Args:
        config: Project configuration
        providers: Provider classes in preference order (default: DEFAULT_PROVIDERS)

    Returns:
        An instance of the first available provider

    Raises:
        MissingDependencyError: If none of the providers is installed
    """
    candidates = [provider_cls(config) for provider_cls in (providers or DEFAULT_PROVIDERS)]

    for provider in candidates:
        if provider.is_available():
            _log_debug(f"Using watch provider: {provider.name}")
            return provider

    names = [provider.name for provider in candidates]
    raise MissingDependencyError(
        f"Neither {' nor '.join(names)} is installed.",
        tools=names,
        hints=[provider.install_hint for provider in candidates if provider.install_hint],
    )
