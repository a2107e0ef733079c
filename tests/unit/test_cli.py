"""Unit tests for the cli dispatcher, with every external process faked."""

import subprocess

import pytest
from typer.testing import CliRunner

from texdock import cli
from texdock.contexts.rendering import image
from texdock.contexts.watching import providers
from texdock.contexts.watching.providers import WatchProvider

runner = CliRunner()


@pytest.fixture
def docker(monkeypatch, fake_popen):
    """Replace subprocess.Popen so no container ever starts."""
    popen = fake_popen(lines=["Latexmk: done"], returncode=0)
    monkeypatch.setattr(subprocess, "Popen", popen)
    return popen


def invoke(project_root, *args):
    return runner.invoke(cli.app, ["--root", str(project_root), *args])


@pytest.mark.unit
def test_unknown_command_exits_1(project_root):
    result = invoke(project_root, "compile")

    assert result.exit_code == 1
    assert "Unknown command: compile" in result.output


@pytest.mark.unit
def test_no_command_exits_1():
    result = runner.invoke(cli.app, [])

    assert result.exit_code == 1


@pytest.mark.unit
@pytest.mark.parametrize("args", [["help"], ["--help"], ["-h"]])
def test_help(args):
    result = runner.invoke(cli.app, args)

    assert result.exit_code == 0
    assert "build" in result.output
    assert "clean" in result.output


@pytest.mark.unit
def test_build_all(project_root, tex_folder, docker):
    """Every discovered folder is built, in order."""
    tex_folder("b")
    tex_folder("a")

    result = invoke(project_root, "build")

    assert result.exit_code == 0
    assert [call[call.index("-w") + 1] for call in docker.calls] == [
        "/workspace/a",
        "/workspace/b",
    ]
    assert "Summary: 2 built, 0 failed" in result.output


@pytest.mark.unit
def test_build_all_keyword(project_root, tex_folder, docker):
    tex_folder("a")

    result = invoke(project_root, "build", "all")

    assert result.exit_code == 0
    assert len(docker.calls) == 1


@pytest.mark.unit
def test_build_all_continues_past_failures(project_root, tex_folder, monkeypatch, fake_popen):
    """A failing folder does not stop the batch; the exit code reports it."""
    tex_folder("a")
    tex_folder("b")
    popen = fake_popen(returncode=1)
    monkeypatch.setattr(subprocess, "Popen", popen)

    result = invoke(project_root, "build")

    assert result.exit_code == 1
    assert len(popen.calls) == 2
    assert "Summary: 0 built, 2 failed" in result.output


@pytest.mark.unit
def test_build_all_with_no_folders(project_root, docker):
    result = invoke(project_root, "build")

    assert result.exit_code == 1
    assert "No folders with .tex files found" in result.output
    assert docker.calls == []


@pytest.mark.unit
def test_build_single_folder(project_root, tex_folder, docker):
    tex_folder("resume_1pg")

    result = invoke(project_root, "build", "resume_1pg")

    assert result.exit_code == 0
    assert len(docker.calls) == 1
    assert "Summary" not in result.output


@pytest.mark.unit
def test_build_folder_without_source(project_root, docker):
    """Folder a has no .tex file: build fails, no container spawned."""
    (project_root / "a").mkdir()

    result = invoke(project_root, "build", "a")

    assert result.exit_code == 1
    assert docker.calls == []


@pytest.mark.unit
@pytest.mark.parametrize("command", ["build", "watch", "clean"])
def test_path_outside_root_rejected(project_root, tmp_path, docker, command, monkeypatch):
    """Paths escaping the root fail with exit 1 before anything is spawned."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "main.tex").write_text("")
    (outside / "main.aux").write_text("")
    monkeypatch.setattr(providers.shutil, "which", lambda name: f"/usr/bin/{name}")

    result = invoke(project_root, command, str(outside))

    assert result.exit_code == 1
    assert "must be within project root" in result.output
    assert docker.calls == []
    assert (outside / "main.aux").exists()


@pytest.mark.unit
def test_relative_escape_rejected(project_root, docker, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    result = invoke(project_root, "build", "../../etc")

    assert result.exit_code == 1
    assert docker.calls == []


@pytest.mark.unit
def test_clean_single_folder(project_root, tex_folder):
    """Folder a has main.aux and main.pdf: clean deletes both."""
    folder = tex_folder("a")
    (folder / "main.aux").write_text("")
    (folder / "main.pdf").write_text("")

    result = invoke(project_root, "clean", "a")

    assert result.exit_code == 0
    assert sorted(path.name for path in folder.iterdir()) == ["main.tex"]


@pytest.mark.unit
def test_clean_all_twice(project_root, tex_folder):
    for name in ["a", "b"]:
        (tex_folder(name) / "main.log").write_text("")

    first = invoke(project_root, "clean")
    second = invoke(project_root, "clean", "all")

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "Summary: 2 cleaned, 0 failed" in second.output
    assert "No build artifacts found" in second.output


@pytest.mark.unit
def test_clean_missing_folder(project_root):
    result = invoke(project_root, "clean", "missing")

    assert result.exit_code == 1


@pytest.mark.unit
def test_watch_without_provider(project_root, tex_folder, docker, monkeypatch):
    """No watch utility: exit 1, nothing built or watched."""
    tex_folder("a")
    monkeypatch.setattr(providers.shutil, "which", lambda name: None)

    result = invoke(project_root, "watch")

    assert result.exit_code == 1
    assert "Neither fswatch nor inotifywait is installed" in result.output
    assert docker.calls == []


class OneShotProvider(WatchProvider):
    name = "one-shot"
    executable = "one-shot"

    def __init__(self, config, changed):
        super().__init__(config)
        self.changed = changed

    def command(self, path):
        return []

    def events(self, path):
        yield self.changed


@pytest.mark.unit
def test_watch_builds_then_rebuilds(project_root, tex_folder, docker, monkeypatch):
    """Initial build of the folder, then one rebuild per change."""
    folder = tex_folder("a")
    monkeypatch.setattr(
        cli, "select_provider", lambda config: OneShotProvider(config, folder / "main.tex")
    )

    result = invoke(project_root, "watch", "a")

    assert result.exit_code == 0
    assert len(docker.calls) == 2


@pytest.mark.unit
def test_watch_interrupt_stops_cleanly(project_root, tex_folder, docker, monkeypatch):
    tex_folder("a")

    class InterruptedProvider(OneShotProvider):
        def events(self, path):
            raise KeyboardInterrupt
            yield

    monkeypatch.setattr(cli, "select_provider", lambda config: InterruptedProvider(config, None))

    result = invoke(project_root, "watch")

    assert result.exit_code == 0
    assert "Stopped watching" in result.output


@pytest.mark.unit
def test_init_builds_image(project_root, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(image.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(subprocess, "run", fake_run)

    result = invoke(project_root, "init")

    assert result.exit_code == 0
    assert calls[0][:4] == ["docker", "build", "-t", "latex-compiler"]


@pytest.mark.unit
def test_init_without_runtime(project_root, monkeypatch):
    monkeypatch.setattr(image.shutil, "which", lambda name: None)

    result = invoke(project_root, "init")

    assert result.exit_code == 1
    assert "Container runtime not found" in result.output


@pytest.mark.unit
def test_config_file_option(project_root, tex_folder, docker, tmp_path):
    tex_folder("a")
    config_file = tmp_path / "texdock.yaml"
    config_file.write_text("image: other-image\n")

    result = invoke(project_root, "--config", str(config_file), "build")

    assert result.exit_code == 0
    assert "other-image" in docker.calls[0]


@pytest.mark.unit
def test_bad_config_file(project_root):
    (project_root / "texdock.yaml").write_text("unknown_key: 1\n")

    result = invoke(project_root, "build")

    assert result.exit_code == 1
    assert "unknown_key" in result.output


@pytest.mark.unit
def test_log_dir_writes_file(project_root, tex_folder, docker, tmp_path):
    tex_folder("a")
    log_dir = tmp_path / "logs"

    result = invoke(project_root, "--log-dir", str(log_dir), "build")

    assert result.exit_code == 0
    assert (log_dir / "texdock.log").exists()


@pytest.mark.unit
def test_build_all_with_one_folder_prints_summary(project_root, tex_folder, docker):
    """The summary follows the 'all' target, not the number of folders found."""
    tex_folder("a")

    result = invoke(project_root, "build")

    assert result.exit_code == 0
    assert "Summary: 1 built, 0 failed" in result.output


@pytest.mark.unit
def test_build_all_with_unstartable_runtime(project_root, tex_folder, monkeypatch):
    """A runtime that cannot be executed fails each folder instead of crashing the batch."""
    tex_folder("a")
    tex_folder("b")

    def popen(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(subprocess, "Popen", popen)

    result = invoke(project_root, "build")

    assert result.exit_code == 1
    assert "Summary: 0 built, 2 failed" in result.output


@pytest.mark.unit
def test_clean_with_scalar_extensions_deletes_nothing(project_root, tex_folder):
    """artifact_extensions: .pdf is a config error, not a match-everything suffix list."""
    folder = tex_folder("a")
    (folder / "README.md").write_text("")
    (folder / "main.pdf").write_text("")
    (project_root / "texdock.yaml").write_text("artifact_extensions: .pdf\n")

    result = invoke(project_root, "clean", "a")

    assert result.exit_code == 1
    assert (folder / "README.md").exists()
    assert (folder / "main.pdf").exists()


@pytest.mark.unit
def test_watch_interrupt_during_initial_build(project_root, tex_folder, monkeypatch):
    """Ctrl-C while the first build runs still stops cleanly."""
    folder = tex_folder("a")

    def popen(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(subprocess, "Popen", popen)
    monkeypatch.setattr(
        cli, "select_provider", lambda config: OneShotProvider(config, folder / "main.tex")
    )

    result = invoke(project_root, "watch", "a")

    assert result.exit_code == 0
    assert "Stopped watching" in result.output
