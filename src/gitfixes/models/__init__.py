"""Data models for fix tracking and path ownership."""

from gitfixes.models.commit import MatchResult, ParsedCommit, Reference, WalkedCommit
from gitfixes.models.config import FixesOptions, Settings, WhoOptions
from gitfixes.models.database import KnownCommitEntry, OwnerCount

__all__ = [
    "Reference",
    "ParsedCommit",
    "WalkedCommit",
    "MatchResult",
    "KnownCommitEntry",
    "OwnerCount",
    "FixesOptions",
    "WhoOptions",
    "Settings",
]
