"""Git repository access for the fix pipeline."""

import configparser
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import git
import structlog
from git import Commit, Repo

from gitfixes.models import WalkedCommit
from gitfixes.pathspec import is_under_any

logger = structlog.get_logger(__name__)

# Errors GitPython raises for names it cannot turn into an object
_LOOKUP_ERRORS = (
    git.exc.BadName,
    git.exc.BadObject,
    git.exc.AmbiguousObjectName,
    ValueError,
    KeyError,
    IndexError,
)

ChangedPaths = List[Tuple[Optional[str], Optional[str]]]


class RepositoryError(ValueError):
    """Raised when the repository backend cannot carry out a request."""


class GitExtractor:
    """Extracts commits, trees and configuration from a Git repository."""

    def __init__(self, repo_path: Path) -> None:
        """Initialize the GitExtractor.

        Args:
            repo_path: Path to the Git repository (or a directory inside it)

        Raises:
            RepositoryError: If repository path is invalid
        """
        self.repo_path = Path(repo_path)
        if not self.repo_path.exists():
            raise RepositoryError(f"Repository path does not exist: {self.repo_path}")

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except git.exc.InvalidGitRepositoryError as e:
            raise RepositoryError(f"Invalid Git repository: {self.repo_path}") from e

    def walk(
        self,
        revision: str = "HEAD",
        reverse: bool = True,
        base: Optional[str] = None,
    ) -> Iterator[WalkedCommit]:
        """Walk the commits of a revision or range in commit-time order.

        Args:
            revision: Single revision (walk all ancestors) or ``A..B`` range
            reverse: Yield the oldest commits first
            base: If given, walk ``merge-base(base, revision)..revision``

        Yields:
            WalkedCommit objects

        Raises:
            RepositoryError: If the revision or range cannot be resolved
        """
        if base:
            merge_base = self.merge_base(base, revision)
            if merge_base is None:
                raise RepositoryError(f"No merge base between {base} and {revision}")
            revision = f"{merge_base}..{revision}"

        logger.debug("walk_started", revision=revision, reverse=reverse)

        try:
            for commit in self.repo.iter_commits(revision, date_order=True, reverse=reverse):
                yield self._walked_commit(commit)
        except git.GitCommandError as e:
            raise RepositoryError(f"Cannot walk revision {revision}") from e

    def resolve(self, name: str) -> Optional[str]:
        """Resolve a revision expression to the full SHA of the object it names.

        Args:
            name: Full or abbreviated SHA, ref name or other revision expression

        Returns:
            Full hex SHA, or None if the name does not resolve
        """
        try:
            return self.repo.rev_parse(name).hexsha
        except _LOOKUP_ERRORS:
            return None

    def merge_base(self, first: str, second: str) -> Optional[str]:
        """Compute the merge base of two revisions.

        Raises:
            RepositoryError: If either revision does not exist
        """
        try:
            bases = self.repo.merge_base(first, second)
        except git.GitCommandError as e:
            raise RepositoryError(f"Cannot compute merge base of {first} and {second}") from e

        if not bases:
            return None
        return bases[0].hexsha

    def diff_paths(
        self,
        parent_hash: str,
        commit_hash: str,
        paths: Optional[Sequence[str]] = None,
    ) -> ChangedPaths:
        """Diff the trees of two commits, optionally restricted to paths.

        Args:
            parent_hash: Commit on the old side of the diff
            commit_hash: Commit on the new side of the diff
            paths: Path scope the diff is limited to

        Returns:
            List of (old path, new path) tuples, one per changed entry.
            Either side is None for added or deleted files.
        """
        parent = self._commit(parent_hash)
        commit = self._commit(commit_hash)

        kwargs = {}
        if paths:
            kwargs["paths"] = list(paths)

        return [(diff.a_path, diff.b_path) for diff in parent.diff(commit, **kwargs)]

    def tree_paths(self, commit_hash: str, paths: Optional[Sequence[str]] = None) -> List[str]:
        """List the file paths in a commit's tree, optionally limited to path prefixes."""
        commit = self._commit(commit_hash)
        result = []

        for item in commit.tree.traverse():
            if item.type != "blob":
                continue
            if paths and not is_under_any(item.path, paths):
                continue
            result.append(item.path)

        return result

    def changed_paths(self, revision: str) -> Optional[List[str]]:
        """Get the paths a revision touched.

        A root commit touched every path in its tree; any other commit is
        compared against its first parent.

        Returns:
            List of paths, or None if ``revision`` does not name a commit
        """
        try:
            commit = self.repo.commit(revision)
        except _LOOKUP_ERRORS:
            return None

        if not commit.parents:
            return self.tree_paths(commit.hexsha)

        diff_index = commit.parents[0].diff(commit)
        return [diff.b_path or diff.a_path for diff in diff_index if diff.b_path or diff.a_path]

    def read_blob(self, revision: str, file_path: str) -> Optional[Tuple[str, str]]:
        """Read a file from the tree of a revision.

        Returns:
            Tuple of (blob SHA, decoded content), or None if the path is
            missing or is not a file

        Raises:
            RepositoryError: If the revision does not exist
        """
        try:
            commit = self.repo.commit(revision)
        except _LOOKUP_ERRORS as e:
            raise RepositoryError(f"Commit not found: {revision}") from e

        try:
            blob = commit.tree / file_path
        except KeyError:
            return None

        if blob.type != "blob":
            return None

        content = blob.data_stream.read().decode("utf-8", errors="replace")
        return blob.hexsha, content

    def config_value(self, key: str) -> Optional[str]:
        """Read a value from the merged git configuration.

        Args:
            key: Dotted key such as ``user.email`` or ``fixes.kernel.pathmap``

        Returns:
            The configured string, or None if unset
        """
        section, _, option = key.rpartition(".")
        if not section:
            return None

        name, _, subsection = section.partition(".")
        if subsection:
            section = f'{name} "{subsection}"'

        reader = self.repo.config_reader()
        try:
            value = reader.get_value(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return None

        return str(value)

    def _commit(self, commit_hash: str) -> Commit:
        try:
            return self.repo.commit(commit_hash)
        except _LOOKUP_ERRORS as e:
            raise RepositoryError(f"Commit not found: {commit_hash}") from e

    def _walked_commit(self, commit: Commit) -> WalkedCommit:
        """Convert a GitPython Commit into the model the pipeline consumes."""
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")

        return WalkedCommit(
            hash=commit.hexsha,
            message=message,
            author_email=commit.author.email or "",
            committer_email=commit.committer.email or "",
            parent_hashes=[p.hexsha for p in commit.parents],
        )
