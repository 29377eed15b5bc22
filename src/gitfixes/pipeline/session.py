"""The fix-finding pipeline run over a walked range of commits."""

from typing import Iterable, Optional

import structlog

from gitfixes.database import Blacklist, KnownCommitIndex, PathBlacklist
from gitfixes.models import FixesOptions, MatchResult, WalkedCommit
from gitfixes.parsing import MessageParser
from gitfixes.pipeline.attribution import AttributionEngine
from gitfixes.pipeline.resolver import ReferenceResolver
from gitfixes.pipeline.results import ResultAggregator, RevertTracker
from gitfixes.pipeline.scope import TreeScopeFilter

logger = structlog.get_logger(__name__)


class FixesSession:
    """Owns all state of one fix-finding run.

    Each walked commit goes through parse -> resolve -> blacklist check ->
    known-commit lookup -> scope filter -> attribution -> aggregation. The
    references of a commit are tried in message order and the first one
    that passes every stage is accepted; a commit yields at most one match.
    After the walk, matches whose commit was reverted later are pruned.
    """

    def __init__(
        self,
        repository,
        index: KnownCommitIndex,
        options: Optional[FixesOptions] = None,
        blacklist: Optional[Blacklist] = None,
        path_blacklist: Optional[PathBlacklist] = None,
    ) -> None:
        """Initialize the session.

        Args:
            repository: Repository collaborator, normally a GitExtractor
            index: Known-commit database
            options: Run options
            blacklist: Commit ids never to report or match against
            path_blacklist: Path prefixes whose changes do not count
        """
        self.repository = repository
        self.index = index
        self.options = options or FixesOptions()
        self.blacklist = blacklist or Blacklist()

        self.parser = MessageParser()
        self.reverts = RevertTracker(self.parser.reverts)
        self.resolver = ReferenceResolver(repository)
        self.scope = TreeScopeFilter(repository, self.options.paths, path_blacklist)
        self.attribution = AttributionEngine(
            domains=self.options.domains,
            committer_filter=self.options.committer,
            show_all=self.options.show_all,
        )
        self.results = ResultAggregator(grouping=not self.options.no_group)

        self.commits_seen = 0
        self.matches = 0
        self.pruned = 0

    def process(self, commit: WalkedCommit) -> Optional[MatchResult]:
        """Run one commit through the pipeline.

        Returns:
            The accepted MatchResult, or None
        """
        self.commits_seen += 1
        parsed = self.parser.parse(commit.hash, commit.message)

        if commit.hash in self.blacklist:
            return None
        # Commits already in the database are not fixes to report
        if self.index.find(commit.hash) is not None:
            return None
        if self.options.stable_only and not parsed.stable:
            return None

        in_scope = None
        for reference in parsed.references:
            if not self.options.match_all and not reference.is_explicit_fix_tag:
                continue

            fixed_id = self.resolver.resolve(reference.token)
            if fixed_id is None or fixed_id in self.blacklist:
                continue

            entry = self.index.find(fixed_id)
            if entry is None:
                continue

            if in_scope is None:
                in_scope = self.scope.matches(commit)
            if not in_scope:
                return None

            accepted, owner = self.attribution.attribute(
                entry, commit.author_email, commit.committer_email
            )
            if not accepted:
                continue

            result = MatchResult(
                commit_id=commit.hash,
                subject=parsed.subject,
                owner=owner,
                stable=parsed.stable,
                source_path=entry.source_path,
                fixed_id=fixed_id,
            )
            self.results.add(owner, result)
            self.matches += 1
            logger.debug("fix_matched", commit=commit.hash, fixes=fixed_id, owner=owner)
            return result

        return None

    def run(self, commits: Iterable[WalkedCommit]) -> ResultAggregator:
        """Process a complete walk, then prune reverted matches."""
        for commit in commits:
            self.process(commit)

        self.pruned = self.reverts.prune(self.results)
        logger.info(
            "fixes_walk_finished",
            commits=self.commits_seen,
            matches=self.matches,
            pruned=self.pruned,
        )
        return self.results

    def walk(self) -> ResultAggregator:
        """Walk the configured range of the repository and run the pipeline over it.

        Raises:
            RepositoryError: If the range cannot be walked
        """
        commits = self.repository.walk(
            revision=self.options.revision,
            reverse=self.options.reverse,
            base=self.options.base,
        )
        return self.run(commits)

    def stats_line(self) -> str:
        return f"Found {self.commits_seen} objects ({self.matches} matches)"
