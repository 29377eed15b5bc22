"""Tests for the command-line interface."""

import tempfile
from pathlib import Path

import git
import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from gitfixes import __version__
from gitfixes.cli import app
from gitfixes.database import Blacklist, KnownCommitIndex
from gitfixes.models import Settings

runner = CliRunner()


@pytest.fixture
def cli_repo():
    """Create a repository with one known commit, a fix for it and a patch series."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo_path = Path(tmpdir)
        repo = git.Repo.init(repo_path)
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()
        author = git.Actor("Alice", "alice@example.com")

        (repo_path / "net").mkdir()
        (repo_path / "net" / "core.c").write_text("int core;\n")
        repo.index.add(["net/core.c"])
        broken = repo.index.commit("net: add core", author=author, committer=author).hexsha

        (repo_path / "net" / "core.c").write_text("int core = 0;\n")
        repo.index.add(["net/core.c"])
        fix = repo.index.commit(
            f"net: initialize core\n\nFixes: {broken[:12]} (\"net: add core\")\n",
            author=author,
            committer=author,
        ).hexsha

        (repo_path / "patches").mkdir()
        (repo_path / "patches" / "core.patch").write_text(
            f"Git-commit: {broken}\nSigned-off-by: Carol <carol@example.com>\n"
        )
        (repo_path / "series.conf").write_text("\tpatches/core.patch\n")
        repo.index.add(["patches/core.patch", "series.conf"])
        repo.index.commit("Add series")

        database = repo_path / "known.list"
        database.write_text(f"{broken[:10]},carol@example.com,patches/core.patch\n")

        yield {"path": repo_path, "broken": broken, "fix": fix, "database": database}


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_fixes_filtered_by_configured_email(cli_repo):
    """Without --all only fixes owned by user.email are shown."""
    result = runner.invoke(
        app, ["fixes", "--repo", str(cli_repo["path"]), "--file", str(cli_repo["database"])]
    )

    assert result.exit_code == 0
    assert "Nothing found" in result.stdout


def test_fixes_all(cli_repo):
    result = runner.invoke(
        app,
        ["fixes", "--repo", str(cli_repo["path"]), "--file", str(cli_repo["database"]), "--all"],
    )

    assert result.exit_code == 0
    assert "carol@example.com (1):" in result.stdout
    assert cli_repo["fix"][:12] in result.stdout
    assert "net: initialize core" in result.stdout


def test_fixes_committer_and_machine(cli_repo):
    result = runner.invoke(
        app,
        [
            "fixes",
            "--repo",
            str(cli_repo["path"]),
            "--file",
            str(cli_repo["database"]),
            "--committer",
            "carol",
            "--machine",
            "--stats",
        ],
    )

    assert result.exit_code == 0
    assert (
        f"carol@example.com;{cli_repo['fix']};patches/core.patch;net: initialize core"
        in result.stdout
    )
    assert "Found 3 objects (1 matches)" in result.stdout


def test_fixes_database_from_git_config(cli_repo):
    repo = git.Repo(cli_repo["path"])
    repo.config_writer().set_value("fixes", "file", str(cli_repo["database"])).release()

    result = runner.invoke(app, ["fixes", "--repo", str(cli_repo["path"]), "-a"])

    assert result.exit_code == 0
    assert "net: initialize core" in result.stdout


def test_fixes_missing_database(cli_repo, tmp_path):
    result = runner.invoke(
        app, ["fixes", "--repo", str(cli_repo["path"]), "--file", str(tmp_path / "missing.list")]
    )

    assert result.exit_code == 1
    assert "Known-commit database not found" in result.stdout


def test_fixes_invalid_repository(tmp_path):
    result = runner.invoke(app, ["fixes", "--repo", str(tmp_path / "nowhere")])

    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_series_stdout(cli_repo):
    result = runner.invoke(
        app, ["series", "HEAD", "--repo", str(cli_repo["path"]), "--stdout", "--domain", "example.com"]
    )

    assert result.exit_code == 0
    assert f"{cli_repo['broken']},carol@example.com,patches/core.patch" in result.stdout


def test_series_to_file(cli_repo, tmp_path):
    output = tmp_path / "head.list"

    result = runner.invoke(
        app, ["series", "HEAD", "--repo", str(cli_repo["path"]), "--file", str(output)]
    )

    assert result.exit_code == 0
    assert "Wrote 1 commits" in result.stdout
    assert output.read_text() == f"{cli_repo['broken']},Unknown,patches/core.patch\n"


def test_series_without_series_file(cli_repo):
    result = runner.invoke(app, ["series", "HEAD~2", "--repo", str(cli_repo["path"]), "--stdout"])

    assert result.exit_code == 1
    assert "No series.conf" in result.stdout


def test_who(cli_repo, tmp_path):
    path_map = tmp_path / "path-map"
    path_map.write_text("net;alice@example.com:5;bob@example.com:2\n")

    result = runner.invoke(
        app,
        ["who", "HEAD~1", "--repo", str(cli_repo["path"]), "--path-map", str(path_map), "-i", "alice@example.com"],
    )

    assert result.exit_code == 0
    assert "bob@example.com (2)" in result.stdout
    assert "alice@example.com" not in result.stdout


def test_who_database_from_git_config(cli_repo, tmp_path):
    path_map = tmp_path / "path-map"
    path_map.write_text("net/core.c;alice@example.com:5\n")
    repo = git.Repo(cli_repo["path"])
    repo.config_writer().set_value('fixes "kernel"', "pathmap", str(path_map)).release()

    result = runner.invoke(app, ["who", "net/core.c", "--repo", str(cli_repo["path"]), "-d", "kernel"])

    assert result.exit_code == 0
    assert "alice@example.com (5)" in result.stdout


def test_who_missing_path_map(cli_repo):
    result = runner.invoke(app, ["who", "HEAD", "--repo", str(cli_repo["path"])])

    assert result.exit_code == 1
    assert "No path-map file given" in result.stdout


def test_logging_outlives_command(cli_repo, tmp_path):
    """Database fallbacks still log after a command configured logging."""
    runner.invoke(app, ["who", "net/core.c", "--repo", str(cli_repo["path"])])

    assert len(KnownCommitIndex.load(tmp_path / "missing.list")) == 0
    assert len(Blacklist.load(tmp_path / "missing-blacklist")) == 0


def test_invalid_log_level(cli_repo, monkeypatch):
    monkeypatch.setenv("GITFIXES_LOG_LEVEL", "chatty")

    result = runner.invoke(app, ["who", "net/core.c", "--repo", str(cli_repo["path"])])

    assert result.exit_code == 1
    assert "Error:" in result.stdout
    assert "log_level must be one of" in result.stdout


def test_invalid_domains_setting(cli_repo, monkeypatch):
    monkeypatch.setenv("GITFIXES_DOMAINS", "corp.com")

    result = runner.invoke(
        app, ["fixes", "--repo", str(cli_repo["path"]), "--file", str(cli_repo["database"])]
    )

    assert result.exit_code == 1
    assert "Error:" in result.stdout


def test_settings_log_level_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
