"""Tests for building known-commit databases from patch series."""

import tempfile
from pathlib import Path

import git
import pytest

from gitfixes.database import KnownCommitIndex, SeriesScanner, default_output_name, write_entries
from gitfixes.database.series import (
    UNKNOWN_OWNER,
    parse_patch_header,
    series_patch_paths,
)
from gitfixes.extraction import GitExtractor, RepositoryError

NET_ID = "1111111111222222222233333333334444444444"
MM_ID = "aaaaaaaaaabbbbbbbbbbccccccccccdddddddddd"
FS_ID = "0123456789abcdef0123456789abcdef01234567"

NET_PATCH = f"""From: Dev <dev@kernel.org>
Subject: net: fix foo
Git-commit: {NET_ID}
Patch-mainline: v6.1
Signed-off-by: Dev <dev@kernel.org>
Acked-by: Jane Doe <jane@suse.example>

--- a/drivers/net/foo.c
+++ b/drivers/net/foo.c
"""

MM_PATCH = f"""From: Dev <dev@kernel.org>
Subject: mm: fix bar
Git-commit: {MM_ID.upper()}
Signed-off-by: Dev <dev@kernel.org>
"""

FS_PATCH = f"""Subject: fs: backport two fixes
Git-commit: {FS_ID}
Git-commit: not-a-commit
Signed-off-by: Joe <joe@SUSE.example>
"""


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def series_repo():
    """Create a repository whose history grows a patch series.

    HEAD~2 has no series, HEAD~1 carries the net patch, HEAD adds more.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        repo_path = Path(tmpdir)
        repo = git.Repo.init(repo_path)
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()

        write(repo_path / "README", "kernel source\n")
        repo.index.add(["README"])
        repo.index.commit("Initial commit")

        write(repo_path / "patches.suse" / "net-fix.patch", NET_PATCH)
        write(repo_path / "series.conf", "# sorted patches\n\tpatches.suse/net-fix.patch\n")
        repo.index.add(["patches.suse/net-fix.patch", "series.conf"])
        repo.index.commit("Add net fix")

        write(repo_path / "patches.suse" / "net-fix-copy.patch", NET_PATCH)
        write(repo_path / "patches.fixes" / "mm-fix.patch", MM_PATCH)
        write(repo_path / "patches.fixes" / "fs-fixes.patch", FS_PATCH)
        write(
            repo_path / "series.conf",
            "# sorted patches\n"
            "\tpatches.suse/net-fix.patch\n"
            "\tpatches.suse/net-fix-copy.patch\n"
            "+mm\tpatches.fixes/mm-fix.patch  # needs review\n"
            "\tpatches.fixes/fs-fixes.patch\n"
            "\tpatches.fixes/missing.patch\n"
            "# patches.fixes/commented-out.patch\n",
        )
        repo.index.add(
            [
                "patches.suse/net-fix-copy.patch",
                "patches.fixes/mm-fix.patch",
                "patches.fixes/fs-fixes.patch",
                "series.conf",
            ]
        )
        repo.index.commit("Add mm and fs fixes")

        yield repo_path


@pytest.fixture
def scanner(series_repo):
    return SeriesScanner(GitExtractor(series_repo), domains=["suse.example"])


def test_series_patch_paths():
    series = "# header\n\tpatches.suse/a.patch\n+tag patches.fixes/b.patch # c\n\n  no-slash\n"

    assert series_patch_paths(series) == ["patches.suse/a.patch", "patches.fixes/b.patch"]


def test_parse_patch_header():
    ids, owner = parse_patch_header(NET_PATCH, ["suse.example"])

    assert ids == [NET_ID]
    assert owner == "jane@suse.example"


def test_parse_patch_header_without_domain_signer():
    ids, owner = parse_patch_header(MM_PATCH, ["suse.example"])

    assert ids == [MM_ID]
    assert owner == UNKNOWN_OWNER


def test_scan(scanner):
    entries = scanner.scan("HEAD")

    assert list(entries) == sorted([NET_ID, MM_ID, FS_ID])
    assert entries[NET_ID].owner == "jane@suse.example"
    # The identical copy shares the blob and is read only once
    assert entries[NET_ID].source_path == "patches.suse/net-fix.patch"
    assert entries[MM_ID].owner == UNKNOWN_OWNER
    assert entries[MM_ID].source_path == "patches.fixes/mm-fix.patch"
    assert entries[FS_ID].owner == "joe@SUSE.example"


def test_scan_older_revision(scanner):
    assert list(scanner.scan("HEAD~1")) == [NET_ID]


def test_scan_without_series(scanner):
    with pytest.raises(ValueError, match="No series.conf"):
        scanner.scan("HEAD~2")


def test_scan_unknown_revision(scanner):
    with pytest.raises(RepositoryError):
        scanner.scan("no-such-branch")


def test_scan_new(scanner):
    entries = scanner.scan_new("HEAD", base="HEAD~1")

    assert list(entries) == sorted([MM_ID, FS_ID])


def test_write_entries_roundtrip(scanner, tmp_path):
    output = tmp_path / "head.list"

    count = write_entries(scanner.scan("HEAD~1").values(), output)
    assert count == 1
    assert output.read_text() == f"{NET_ID},jane@suse.example,patches.suse/net-fix.patch\n"

    count = write_entries(scanner.scan_new("HEAD", "HEAD~1").values(), output, append=True)
    assert count == 2

    index = KnownCommitIndex.load(output)
    assert len(index) == 3
    assert index.lookup(MM_ID).owner == UNKNOWN_OWNER


def test_write_entries_truncates(tmp_path):
    output = tmp_path / "out.list"
    output.write_text("stale\n")

    assert write_entries([], output) == 0
    assert output.read_text() == ""


def test_default_output_name():
    assert default_output_name("origin/SLE15-SP5") == "SLE15-SP5.list"
    assert default_output_name("master") == "master.list"
