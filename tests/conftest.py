"""Shared fixtures and process fakes for texdock tests."""

import sys
from pathlib import Path
from typing import List, Optional

import pytest
from loguru import logger

from texdock.config import TexdockConfig

ENV_VARS = ["TEXDOCK_IMAGE", "TEXDOCK_RUNTIME", "TEXDOCK_LOG_DIR", "TEXDOCK_PROJECT_ROOT"]


class FakeProcess:
    """Stands in for a subprocess.Popen object."""

    def __init__(self, lines: List[str], returncode: int = 0, running: bool = False):
        self.stdout = [f"{line}\n" for line in lines]
        self.returncode = returncode
        self.running = running
        self.terminated = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def wait(self) -> int:
        return self.returncode

    def poll(self) -> Optional[int]:
        if self.running and not self.terminated:
            return None
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True


class FakePopen:
    """Records every command and returns a FakeProcess for it."""

    def __init__(self, lines=(), returncode: int = 0, running: bool = False):
        self.lines = list(lines)
        self.returncode = returncode
        self.running = running
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []
        self.processes: List[FakeProcess] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        process = FakeProcess(self.lines, self.returncode, self.running)
        self.processes.append(process)
        return process


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TEXDOCK_* variables from the developer's shell out of tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks bound to streams that CliRunner closes after each invoke."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def config(project_root) -> TexdockConfig:
    return TexdockConfig(project_root=project_root)


def make_tex_folder(root: Path, name: str, tex_name: str = "main.tex") -> Path:
    folder = root / name
    folder.mkdir(parents=True, exist_ok=True)
    (folder / tex_name).write_text("\\documentclass{article}\n")
    return folder


@pytest.fixture
def tex_folder(project_root):
    """Factory creating a folder with one .tex file under the project root."""

    def _make(name: str, tex_name: str = "main.tex") -> Path:
        return make_tex_folder(project_root, name, tex_name)

    return _make


@pytest.fixture
def fake_popen():
    """The FakePopen class, for tests that script process output."""
    return FakePopen
