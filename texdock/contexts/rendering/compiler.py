"""
Containerized LaTeX Compilation

Compiles the .tex source of one folder to PDF by running latexmk inside the
container image. The project root is mounted at the workspace mount point and
the container's working directory is set to the folder being built, so
relative \\input and \\includegraphics paths behave as they do locally.
"""

import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from texdock.config import TexdockConfig
from texdock.contexts.rendering.logger import (
    _log_error,
    echo_compiler_line,
    log_compilation_result,
    log_compilation_start,
)
from texdock.contexts.rendering.output_filter import OutputFilter
from texdock.contexts.workspace.discovery import find_source_file
from texdock.contexts.workspace.sandbox import is_within


@dataclass
class CompilationResult:
    """
    Result of compiling one folder.

    Attributes:
        folder: Folder that was built
        success: Whether the compiler exited with status 0
        tex_file: Source file that was compiled (None if none was found)
        return_code: Exit status of the container (None if it never ran)
        output: Compiler output lines that were shown
        suppressed: Number of output lines hidden by the warning filters
        errors: Reasons the build failed before or while running
        elapsed: Wall time spent in the container, in seconds
    """

    folder: Path
    success: bool
    tex_file: Optional[Path] = None
    return_code: Optional[int] = None
    output: List[str] = field(default_factory=list)
    suppressed: int = 0
    errors: List[str] = field(default_factory=list)
    elapsed: float = 0.0


class Compiler:
    """
    Builds folders with the configured container image.

    Args:
        config: Project configuration
        echo: Callable receiving each displayed output line (default: console)
        popen: Process factory (default: subprocess.Popen)
    """

    def __init__(
        self,
        config: TexdockConfig,
        echo: Optional[Callable[[str], None]] = None,
        popen: Optional[Callable[..., subprocess.Popen]] = None,
    ):
        self.config = config
        self.output_filter = OutputFilter(config.warning_filters)
        self._echo = echo or echo_compiler_line
        self._popen = popen or subprocess.Popen

    def command(self, folder: Path, tex_file: Path) -> List[str]:
        """
        Build the container command for a folder.

        Args:
            folder: Resolved folder under the project root
            tex_file: Source file inside that folder

        Returns:
            Argument list for the container runtime
        """
        mount = self.config.workspace_mount.rstrip("/")
        rel_path = folder.relative_to(self.config.project_root).as_posix()
        workdir = mount if rel_path == "." else f"{mount}/{rel_path}"

        return [
            self.config.runtime,
            "run",
            "--rm",
            "-v",
            f"{self.config.project_root}:{mount}",
            "-w",
            workdir,
            self.config.image,
            *self.config.build_command,
            tex_file.name,
        ]

    def compile_folder(self, folder: Path) -> CompilationResult:
        """
        Compile the source file of a folder.

        No process is spawned when the folder is missing or has no source
        file. Failures are returned, not raised, so batch and watch loops can
        carry on with the next folder.

        Args:
            folder: Folder under the project root

        Returns:
            CompilationResult; success iff the container exited with status 0
        """
        folder = Path(folder).resolve()
        folder_name = folder.name

        if not is_within(folder, self.config.project_root):
            return self._failed(
                folder, f"Folder must be within project root: {self.config.project_root}"
            )
        if not folder.is_dir():
            return self._failed(folder, f"Folder does not exist: {folder}")

        tex_file = find_source_file(folder, self.config.source_suffix)
        if tex_file is None:
            return self._failed(folder, f"No {self.config.source_suffix} file found in: {folder}")

        cmd = self.command(folder, tex_file)
        log_compilation_start(folder_name, tex_file.name, cmd)

        result = CompilationResult(folder=folder, success=False, tex_file=tex_file)
        start_time = time.time()

        try:
            with self._popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            ) as process:
                for raw_line in process.stdout:
                    line = raw_line.rstrip("\n")
                    if self.output_filter.is_suppressed(line):
                        result.suppressed += 1
                        continue
                    result.output.append(line)
                    self._echo(line)
                result.return_code = process.wait()
        except FileNotFoundError:
            result.errors.append(f"Container runtime not found: {self.config.runtime}")
        except OSError as e:
            result.errors.append(f"Could not start container runtime {self.config.runtime}: {e}")

        result.elapsed = time.time() - start_time
        result.success = result.return_code == 0
        if result.return_code not in (None, 0):
            result.errors.append(f"Compiler exited with status {result.return_code}")

        log_compilation_result(folder_name, result)
        return result

    def _failed(self, folder: Path, message: str) -> CompilationResult:
        _log_error(message)
        return CompilationResult(folder=folder, success=False, errors=[message])
