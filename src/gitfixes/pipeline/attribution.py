"""Routing of matched fixes to owners."""

from typing import Iterable, Optional, Tuple

from gitfixes.addresses import email_domain_in
from gitfixes.models import KnownCommitEntry


class AttributionEngine:
    """Assigns an owner to a match and applies the committer filter.

    The owner starts out as the one recorded in the known-commit database.
    If the fix was authored (or else committed) by someone whose email
    domain is configured, that person becomes the owner instead. The
    committer filter is applied to the final owner.
    """

    def __init__(
        self,
        domains: Optional[Iterable[str]] = None,
        committer_filter: str = "",
        show_all: bool = False,
    ) -> None:
        self.domains = [d.lower() for d in domains or []]
        self.committer_filter = committer_filter
        self.show_all = show_all

    def owner_for(self, entry: KnownCommitEntry, author_email: str, committer_email: str) -> str:
        if self.domains:
            if email_domain_in(author_email, self.domains):
                return author_email
            if email_domain_in(committer_email, self.domains):
                return committer_email
        return entry.owner

    def attribute(
        self,
        entry: KnownCommitEntry,
        author_email: str,
        committer_email: str,
    ) -> Tuple[bool, str]:
        """Attribute a match.

        Returns:
            Tuple of (accepted, owner)
        """
        owner = self.owner_for(entry, author_email, committer_email)

        if self.committer_filter and not self.show_all:
            if self.committer_filter not in owner:
                return False, owner

        return True, owner
