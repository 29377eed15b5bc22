"""Build known-commit databases from a patch series stored in git."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import structlog

from gitfixes.addresses import email_domain_in
from gitfixes.database.known_commits import is_hex
from gitfixes.extraction import GitExtractor
from gitfixes.models import KnownCommitEntry

logger = structlog.get_logger(__name__)

SERIES_FILE = "series.conf"
UNKNOWN_OWNER = "Unknown"
SIGNATURE_TAGS = ("signed-off-by", "acked-by")


def series_patch_paths(series: str) -> List[str]:
    """Extract patch paths from a series file.

    Comments start with ``#``; on each remaining line the first
    whitespace-separated item containing a ``/`` is the patch path.
    """
    paths = []
    for line in series.splitlines():
        line = line.split("#", 1)[0]
        for item in line.split():
            if "/" in item:
                paths.append(item)
                break
    return paths


def parse_patch_header(content: str, domains: Iterable[str]):
    """Collect upstream commit ids and the owning address from a patch.

    Returns:
        Tuple of (list of lowercase commit ids, owner)
    """
    owner = UNKNOWN_OWNER
    commit_ids = []

    for line in content.splitlines():
        tag, sep, value = line.partition(":")
        if not sep:
            continue
        tag = tag.strip().lower()

        if tag == "git-commit":
            commit_id = value.strip().lower()
            if len(commit_id) == 40 and is_hex(commit_id):
                commit_ids.append(commit_id)
        elif tag in SIGNATURE_TAGS:
            for item in value.split():
                email = item.strip("<>,")
                if "@" in email and email_domain_in(email, domains):
                    owner = email

    return commit_ids, owner


class SeriesScanner:
    """Reads a patch series and maps every upstream commit id to its owner."""

    def __init__(self, extractor: GitExtractor, domains: Iterable[str]) -> None:
        self.extractor = extractor
        self.domains = list(domains)
        self._seen_blobs: Set[str] = set()

    def scan(self, revision: str) -> Dict[str, KnownCommitEntry]:
        """Scan the series at a revision.

        Args:
            revision: Revision whose tree holds ``series.conf`` and the patches

        Returns:
            Mapping of commit id -> KnownCommitEntry, ordered by id

        Raises:
            RepositoryError: If the revision does not exist
            ValueError: If the revision has no series file
        """
        self._seen_blobs.clear()

        series = self.extractor.read_blob(revision, SERIES_FILE)
        if series is None:
            raise ValueError(f"No {SERIES_FILE} in revision {revision}")

        results: Dict[str, KnownCommitEntry] = {}
        for patch_path in series_patch_paths(series[1]):
            blob = self.extractor.read_blob(revision, patch_path)
            if blob is None:
                logger.warning("series_patch_missing", revision=revision, path=patch_path)
                continue

            blob_id, content = blob
            # Identical patch files only need to be read once
            if blob_id in self._seen_blobs:
                continue
            self._seen_blobs.add(blob_id)

            commit_ids, owner = parse_patch_header(content, self.domains)
            for commit_id in commit_ids:
                results[commit_id] = KnownCommitEntry(
                    commit_id=commit_id, owner=owner, source_path=patch_path
                )

        logger.info("series_scanned", revision=revision, commits=len(results))
        return dict(sorted(results.items()))

    def scan_new(self, revision: str, base: str) -> Dict[str, KnownCommitEntry]:
        """Scan a revision and keep only the ids not present at ``base``."""
        base_ids = set(self.scan(base))
        return {k: v for k, v in self.scan(revision).items() if k not in base_ids}


def write_entries(
    entries: Iterable[KnownCommitEntry],
    path: Path,
    append: bool = False,
) -> int:
    """Write entries in the known-commit database format.

    Returns:
        Number of rows written
    """
    count = 0
    with open(path, "a" if append else "w", encoding="utf-8") as f:
        for entry in entries:
            f.write(entry.to_line() + "\n")
            count += 1
    return count


def default_output_name(revision: str) -> str:
    """Default database file name for a revision: its last path component plus ``.list``."""
    return revision.rstrip("/").rpartition("/")[2] + ".list"
