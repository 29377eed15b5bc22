"""Commit id and path exclusion lists."""

import bisect
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from gitfixes.database.known_commits import is_hex
from gitfixes.pathspec import is_under_any, normalize_prefix

logger = structlog.get_logger(__name__)


def read_list_file(path: Path) -> Optional[List[str]]:
    """Read a one-item-per-line file with ``#`` comments stripped.

    Returns:
        The non-empty items, or None if the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError as e:
        logger.warning("list_file_open_failed", path=str(path), error=str(e))
        return None

    items = []
    for line in lines:
        line = line.split("#", 1)[0].strip()
        if line:
            items.append(line)
    return items


class Blacklist:
    """Sorted set of commit ids that must never be reported."""

    def __init__(self, commit_ids: Optional[Iterable[str]] = None) -> None:
        self._ids: List[str] = []
        self.extend(commit_ids or [])

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, commit_id: str) -> bool:
        key = commit_id.lower()
        pos = bisect.bisect_left(self._ids, key)
        return pos < len(self._ids) and self._ids[pos] == key

    def extend(self, commit_ids: Iterable[str]) -> None:
        """Add ids, dropping anything that is not hex."""
        ids = set(self._ids)
        for commit_id in commit_ids:
            commit_id = commit_id.strip().lower()
            if is_hex(commit_id):
                ids.add(commit_id)
            else:
                logger.debug("blacklist_row_skipped", row=commit_id)
        self._ids = sorted(ids)

    @classmethod
    def load(cls, path: Path) -> "Blacklist":
        items = read_list_file(path)
        return cls(items or [])


class PathBlacklist:
    """Path prefixes whose changes do not count towards a commit's scope."""

    def __init__(self, prefixes: Optional[Iterable[str]] = None) -> None:
        self.prefixes: List[str] = [
            normalize_prefix(p) for p in prefixes or [] if normalize_prefix(p)
        ]

    def __len__(self) -> int:
        return len(self.prefixes)

    def __bool__(self) -> bool:
        return bool(self.prefixes)

    def covers(self, path: Optional[str]) -> bool:
        """Return True if ``path`` lies under an excluded prefix.

        A missing path (the absent side of an add or delete) is covered.
        """
        if not path:
            return True
        return is_under_any(path, self.prefixes)

    @classmethod
    def load(cls, path: Path) -> "PathBlacklist":
        items = read_list_file(path)
        return cls(items or [])
