"""Path scope filtering of walked commits."""

from typing import Iterable, Optional

import structlog

from gitfixes.database import PathBlacklist
from gitfixes.models import WalkedCommit

logger = structlog.get_logger(__name__)


class TreeScopeFilter:
    """Decides whether a commit changed anything inside the requested paths.

    Changes that lie entirely under the path blacklist do not count. A merge
    is in scope if the comparison against any one of its parents is.
    """

    def __init__(
        self,
        repository,
        paths: Optional[Iterable[str]] = None,
        path_blacklist: Optional[PathBlacklist] = None,
    ) -> None:
        """Initialize the filter.

        Args:
            repository: Object providing ``diff_paths`` and ``tree_paths``,
                normally a GitExtractor
            paths: Requested path scope (empty means the whole tree)
            path_blacklist: Prefixes whose changes are ignored
        """
        self.repository = repository
        self.paths = [p for p in paths or [] if p]
        self.path_blacklist = path_blacklist or PathBlacklist()

    @property
    def active(self) -> bool:
        return bool(self.paths) or bool(self.path_blacklist)

    def matches(self, commit: WalkedCommit) -> bool:
        """Check whether a commit is in scope."""
        if not self.active:
            return True

        if commit.is_root:
            return self._root_matches(commit)

        for parent in commit.parent_hashes:
            changes = self.repository.diff_paths(parent, commit.hash, self.paths or None)
            if any(self._counts(old, new) for old, new in changes):
                return True

        logger.debug("commit_out_of_scope", commit=commit.hash)
        return False

    def _root_matches(self, commit: WalkedCommit) -> bool:
        if not self.paths:
            return False
        tree_paths = self.repository.tree_paths(commit.hash, self.paths)
        return any(not self.path_blacklist.covers(path) for path in tree_paths)

    def _counts(self, old_path: Optional[str], new_path: Optional[str]) -> bool:
        # A change counts unless both of its sides are blacklisted
        return not (self.path_blacklist.covers(old_path) and self.path_blacklist.covers(new_path))
