"""
Configuration for texdock

Builds one explicit TexdockConfig value from three layers, later layers
overriding earlier ones:

1. DEFAULTS below
2. A YAML file (--config, else <project_root>/texdock.yaml when present)
3. TEXDOCK_* environment variables (a project .env is loaded via python-dotenv)

Examples:
    >>> config = load_config(Path("~/resumes").expanduser())
    >>> config.image
    'latex-compiler'
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import dotenv_values, find_dotenv, load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from texdock.exceptions import ConfigError

# Search from the working directory, not from the installed package
load_dotenv(find_dotenv(usecwd=True))

CONFIG_FILENAME = "texdock.yaml"

DEFAULTS: Dict[str, Any] = {
    "image": "latex-compiler",
    "runtime": "docker",
    "workspace_mount": "/workspace",
    "dockerfile": None,
    "build_command": ["latexmk", "-xelatex", "-interaction=nonstopmode"],
    "source_suffix": ".tex",
    "search_depth": 2,
    "artifact_extensions": [".aux", ".log", ".pdf", ".xdv", ".fdb_latexmk", ".fls", ".out"],
    # xdvipdfmx complains about missing ToUnicode CMaps for most OpenType fonts
    "warning_filters": [r"xdvipdfmx:warning:.*ToUnicode CMap"],
    "ignored_dirs": [".git"],
    "log_dir": None,
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "TEXDOCK_IMAGE": "image",
    "TEXDOCK_RUNTIME": "runtime",
    "TEXDOCK_LOG_DIR": "log_dir",
}

# Expected shape of each setting after merging
SETTING_TYPES = {
    "image": str,
    "runtime": str,
    "workspace_mount": str,
    "dockerfile": str,
    "build_command": list,
    "source_suffix": str,
    "search_depth": int,
    "artifact_extensions": list,
    "warning_filters": list,
    "ignored_dirs": list,
    "log_dir": str,
}
OPTIONAL_KEYS = {"dockerfile", "log_dir"}


@dataclass
class TexdockConfig:
    """
    Settings shared by every texdock component.

    Attributes:
        project_root: Resolved sandbox boundary; all targets live under it
        image: Docker image tag used for compilation
        runtime: Container runtime executable
        workspace_mount: Mount point of the project root inside the container
        dockerfile: Image description used by `init` (None means auto-detect)
        build_command: Compiler command run inside the container (file name appended)
        source_suffix: Extension of document source files
        search_depth: How many directory levels discovery looks at
        artifact_extensions: Generated file extensions removed by `clean`
        warning_filters: Regexes for compiler output lines hidden from display
        ignored_dirs: Directory names skipped by discovery and watch
        log_dir: Directory for the DEBUG log file (None disables file logging)
    """

    project_root: Path
    image: str = DEFAULTS["image"]
    runtime: str = DEFAULTS["runtime"]
    workspace_mount: str = DEFAULTS["workspace_mount"]
    dockerfile: Optional[Path] = None
    build_command: List[str] = field(default_factory=lambda: list(DEFAULTS["build_command"]))
    source_suffix: str = DEFAULTS["source_suffix"]
    search_depth: int = DEFAULTS["search_depth"]
    artifact_extensions: List[str] = field(
        default_factory=lambda: list(DEFAULTS["artifact_extensions"])
    )
    warning_filters: List[str] = field(default_factory=lambda: list(DEFAULTS["warning_filters"]))
    ignored_dirs: List[str] = field(default_factory=lambda: list(DEFAULTS["ignored_dirs"]))
    log_dir: Optional[Path] = None

    def __post_init__(self):
        self.project_root = Path(self.project_root).resolve()
        if self.dockerfile is not None:
            self.dockerfile = _under_root(Path(self.dockerfile), self.project_root)
        if self.log_dir is not None:
            self.log_dir = _under_root(Path(self.log_dir), self.project_root)


def _under_root(path: Path, project_root: Path) -> Path:
    """Anchor relative paths at the project root."""
    path = path.expanduser()
    return path if path.is_absolute() else project_root / path


def _load_file_layer(config_path: Path) -> Dict[str, Any]:
    """
    Load a YAML config file and check its keys.

    Args:
        config_path: Path to the YAML file

    Returns:
        Plain dict of settings

    Raises:
        ConfigError: If the file cannot be parsed or has unknown keys
    """
    try:
        loaded = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    except (OmegaConfBaseException, OSError, ValueError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    unknown = sorted(set(loaded) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    return loaded


def _load_env_layer(project_root: Path) -> Dict[str, Any]:
    """
    Collect TEXDOCK_* overrides that are set and non-empty.

    Variables from <project_root>/.env apply unless the real environment sets them.
    """
    dotenv_file = project_root / ".env"
    env = dotenv_values(dotenv_file) if dotenv_file.is_file() else {}
    env.update(os.environ)
    return {key: env[var] for var, key in ENV_OVERRIDES.items() if env.get(var)}


def _check_types(settings: Dict[str, Any]) -> None:
    """
    Reject values of the wrong shape before they reach any component.

    Raises:
        ConfigError: If a key holds the wrong type
    """
    for key, expected in SETTING_TYPES.items():
        value = settings[key]
        if value is None and key in OPTIONAL_KEYS:
            continue
        if expected is list:
            if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
                raise ConfigError(f"{key} must be a list of non-empty strings, got {value!r}")
        elif expected is int:
            if isinstance(value, bool):
                raise ConfigError(f"{key} must be an integer, got {value!r}")
            try:
                settings[key] = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{key} must be an integer, got {value!r}") from e
        elif not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got {value!r}")


def load_config(project_root: Path, config_path: Optional[Path] = None) -> TexdockConfig:
    """
    Build the configuration for a project root.

    Args:
        project_root: Directory acting as the sandbox boundary
        config_path: Optional YAML file (default: <project_root>/texdock.yaml if it exists)

    Returns:
        TexdockConfig with defaults, file settings and env overrides merged

    Raises:
        ConfigError: If an explicit config_path does not exist or the file is invalid
    """
    project_root = Path(project_root).expanduser().resolve()

    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    elif (project_root / CONFIG_FILENAME).is_file():
        config_path = project_root / CONFIG_FILENAME

    layers = [OmegaConf.create(DEFAULTS)]
    if config_path is not None:
        layers.append(OmegaConf.create(_load_file_layer(config_path)))
    layers.append(OmegaConf.create(_load_env_layer(project_root)))

    try:
        merged = OmegaConf.to_container(OmegaConf.merge(*layers), resolve=True)
    except OmegaConfBaseException as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    _check_types(merged)

    return TexdockConfig(project_root=project_root, **merged)
