"""Path-ownership database: who contributed how much to which path."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import structlog

from gitfixes.models import OwnerCount

logger = structlog.get_logger(__name__)


def merge_counts(target: Dict[str, int], counts: Dict[str, int]) -> None:
    for name, count in counts.items():
        target[name] = target.get(name, 0) + count


class PathMap:
    """Static mapping of path -> {name: contribution count}."""

    def __init__(self, paths: Optional[Dict[str, Dict[str, int]]] = None) -> None:
        self.paths: Dict[str, Dict[str, int]] = paths or {}

    def __len__(self) -> int:
        return len(self.paths)

    @staticmethod
    def parse_line(line: str):
        """Parse one ``path;name:count;name:count`` row.

        Returns:
            Tuple of (path, counts), or None if the row has no ``;``
        """
        line = line.rstrip("\r\n")
        if ";" not in line:
            return None

        path, _, rest = line.partition(";")
        counts: Dict[str, int] = {}

        for token in rest.split(";"):
            name, sep, count = token.partition(":")
            if not sep:
                continue
            try:
                value = int(count.strip())
            except ValueError:
                logger.debug("path_map_count_skipped", path=path, token=token)
                continue
            counts[name] = counts.get(name, 0) + value

        return path, counts

    @classmethod
    def load(cls, path: Path) -> "PathMap":
        """Load the database from a file.

        Raises:
            OSError: If the file cannot be opened
        """
        paths: Dict[str, Dict[str, int]] = {}
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                parsed = cls.parse_line(line)
                if parsed is None:
                    continue
                key, counts = parsed
                paths[key] = counts

        logger.info("path_map_loaded", path=str(path), paths=len(paths))
        return cls(paths)

    def longest_prefix(self, path: str) -> Optional[str]:
        """Find the longest stored path equal to ``path`` or one of its parent directories."""
        while path:
            if path in self.paths:
                return path
            path = path.rpartition("/")[0]
        return None

    def matched_paths(self, paths: Iterable[str]) -> Set[str]:
        """Select the stored paths that cover a set of queried paths.

        Unknown paths contribute their longest stored prefix. Queried paths
        already covered by such a prefix are not counted a second time.
        """
        paths = set(paths)
        prefixes: Set[str] = set()

        for path in paths:
            if path in self.paths:
                continue
            prefix = self.longest_prefix(path)
            if prefix is not None:
                prefixes.add(prefix)

        matched = set(prefixes)
        for path in paths:
            if path not in self.paths:
                continue
            if any(path == p or path.startswith(p + "/") for p in prefixes):
                continue
            matched.add(path)

        return matched

    def rank(self, paths: Iterable[str], ignore: Optional[Iterable[str]] = None) -> List[OwnerCount]:
        """Rank contributors to a set of paths, most contributions first.

        Names in ``ignore`` are left out unless that would leave nothing.
        """
        totals: Dict[str, int] = {}
        for path in sorted(self.matched_paths(paths)):
            merge_counts(totals, self.paths[path])

        ranking = [OwnerCount(name=name, count=count) for name, count in totals.items()]
        ranking.sort(key=lambda p: p.count, reverse=True)

        ignored = set(ignore or [])
        remaining = [p for p in ranking if p.name not in ignored]
        if remaining:
            return remaining
        return ranking
