"""Sorted index of catalogued commits."""

import bisect
import string
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from gitfixes.models import KnownCommitEntry

logger = structlog.get_logger(__name__)

# Shortest abbreviation git itself accepts
MIN_ABBREV = 4


def is_hex(value: str) -> bool:
    return bool(value) and all(c in string.hexdigits for c in value)


class KnownCommitIndex:
    """Read-only lookup structure over the known-commit database.

    Entries are kept sorted by lowercase commit id so lookups can use a
    lower-bound search. Stored ids may be full SHAs or abbreviations.
    """

    def __init__(self, entries: Optional[Iterable[KnownCommitEntry]] = None) -> None:
        self._entries: List[KnownCommitEntry] = []
        for entry in entries or []:
            self._entries.append(entry.model_copy(update={"commit_id": entry.commit_id.lower()}))
        self._entries.sort(key=lambda e: e.commit_id)
        self._keys = [e.commit_id for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __contains__(self, commit_id: str) -> bool:
        return self.lookup(commit_id) is not None

    def lookup(self, commit_id: str) -> Optional[KnownCommitEntry]:
        """Find the entry stored under exactly this id (case-insensitive)."""
        key = commit_id.lower()
        pos = bisect.bisect_left(self._keys, key)
        if pos < len(self._keys) and self._keys[pos] == key:
            return self._entries[pos]
        return None

    def find(self, full_id: str) -> Optional[KnownCommitEntry]:
        """Find the entry for a full SHA.

        Exact entries win; otherwise the longest stored abbreviation that is
        a prefix of ``full_id`` matches.
        """
        key = full_id.lower()
        for length in range(len(key), MIN_ABBREV - 1, -1):
            entry = self.lookup(key[:length])
            if entry is not None:
                return entry
        return None

    @classmethod
    def parse_line(cls, line: str) -> Optional[KnownCommitEntry]:
        """Parse one ``id[,owner[,path]]`` row.

        Returns:
            KnownCommitEntry, or None for blank rows and rows without a hex id
        """
        line = line.strip()
        if not line:
            return None

        fields = [field.strip() for field in line.split(",", 2)]
        commit_id = fields[0].lower()
        if not is_hex(commit_id):
            logger.debug("known_commit_row_skipped", row=line)
            return None

        return KnownCommitEntry(
            commit_id=commit_id,
            owner=fields[1] if len(fields) > 1 else "",
            source_path=fields[2] if len(fields) > 2 else "",
        )

    @classmethod
    def load(cls, path: Path) -> "KnownCommitIndex":
        """Load the database from a file.

        A file that cannot be opened is reported and yields an empty index.
        """
        entries = []
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    entry = cls.parse_line(line)
                    if entry is not None:
                        entries.append(entry)
        except OSError as e:
            logger.error("known_commit_database_open_failed", path=str(path), error=str(e))
            return cls()

        logger.info("known_commit_database_loaded", path=str(path), entries=len(entries))
        return cls(entries)
