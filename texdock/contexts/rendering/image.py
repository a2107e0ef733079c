"""
Container image builds for `init`.

The Dockerfile is taken from the config when set, else from the project root,
else the one shipped inside this package.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from texdock.config import TexdockConfig
from texdock.contexts.rendering.logger import _log_debug, _log_error, _log_info, _log_success
from texdock.exceptions import MissingDependencyError

PACKAGED_DOCKERFILE = Path(__file__).parent / "docker" / "Dockerfile"


def resolve_dockerfile(config: TexdockConfig) -> Path:
    """
    Pick the Dockerfile used to build the image.

    Args:
        config: Project configuration

    Returns:
        Path to an existing Dockerfile

    Raises:
        FileNotFoundError: If the configured Dockerfile does not exist
    """
    if config.dockerfile is not None:
        if not config.dockerfile.is_file():
            raise FileNotFoundError(f"Dockerfile not found: {config.dockerfile}")
        return config.dockerfile

    project_dockerfile = config.project_root / "Dockerfile"
    if project_dockerfile.is_file():
        return project_dockerfile

    return PACKAGED_DOCKERFILE


def image_build_command(config: TexdockConfig, dockerfile: Path) -> List[str]:
    """Argument list for building the image, using the Dockerfile's folder as context."""
    return [config.runtime, "build", "-t", config.image, "-f", str(dockerfile), str(dockerfile.parent)]


def build_image(
    config: TexdockConfig,
    run: Optional[Callable[..., subprocess.CompletedProcess]] = None,
) -> bool:
    """
    Build the compilation image.

    Build output streams straight to the terminal.

    Args:
        config: Project configuration
        run: Process runner (default: subprocess.run)

    Returns:
        True if the runtime exited with status 0

    Raises:
        MissingDependencyError: If the container runtime is not installed
        FileNotFoundError: If the configured Dockerfile does not exist
    """
    run = run or subprocess.run

    if shutil.which(config.runtime) is None:
        raise MissingDependencyError(
            f"Container runtime not found: {config.runtime}",
            tools=[config.runtime],
            hints=["https://docs.docker.com/get-docker/"],
        )

    dockerfile = resolve_dockerfile(config)
    cmd = image_build_command(config, dockerfile)

    _log_info(f"Building Docker image: {config.image}")
    _log_debug(f"  Dockerfile: {dockerfile}")
    _log_debug(f"  Command: {' '.join(cmd)}")

    completed = run(cmd)

    if completed.returncode == 0:
        _log_success("Docker image built successfully!")
        return True

    _log_error(f"Failed to build Docker image (exit status {completed.returncode})")
    return False
