"""Accumulation and revert pruning of match results."""

from typing import Dict, List, Optional, Tuple

import structlog

from gitfixes.models import MatchResult

logger = structlog.get_logger(__name__)

DEFAULT_GROUP = "default"


class ResultAggregator:
    """Groups match results by owner, keeping discovery order within a group."""

    def __init__(self, grouping: bool = True) -> None:
        self.grouping = grouping
        self.groups: Dict[str, List[MatchResult]] = {}

    def __len__(self) -> int:
        return sum(len(members) for members in self.groups.values())

    def add(self, owner: str, result: MatchResult) -> None:
        key = owner if self.grouping else DEFAULT_GROUP
        self.groups.setdefault(key, []).append(result)

    def remove_commit(self, commit_id: str) -> int:
        """Drop every result for ``commit_id`` from every group.

        Returns:
            Number of results removed
        """
        removed = 0
        for key, members in self.groups.items():
            kept = [r for r in members if r.commit_id != commit_id]
            removed += len(members) - len(kept)
            self.groups[key] = kept
        return removed

    def non_empty_groups(self) -> List[Tuple[str, List[MatchResult]]]:
        """Groups that still have members, ordered by owner."""
        return [(key, self.groups[key]) for key in sorted(self.groups) if self.groups[key]]

    @property
    def found(self) -> bool:
        return any(self.groups.values())

    def all_results(self) -> List[MatchResult]:
        return [r for _, members in self.non_empty_groups() for r in members]


class RevertTracker:
    """Reverting commit -> reverted commit pairs seen during a walk.

    Pruning must run once, after the whole range was walked, since a revert
    usually shows up later in history than the commit it reverts.
    """

    def __init__(self, reverts: Optional[Dict[str, str]] = None) -> None:
        self.reverts: Dict[str, str] = reverts if reverts is not None else {}

    def __len__(self) -> int:
        return len(self.reverts)

    def record(self, reverter: str, target: str) -> None:
        self.reverts[reverter] = target.lower()

    def prune(self, aggregator: ResultAggregator) -> int:
        """Remove all results whose commit was reverted.

        Returns:
            Number of results removed
        """
        removed = 0
        for reverter, target in self.reverts.items():
            count = aggregator.remove_commit(target)
            if count:
                logger.info("reverted_fix_pruned", commit=target, reverted_by=reverter)
            removed += count
        return removed
