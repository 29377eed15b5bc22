"""Persisted commit, exclusion and ownership databases."""

from gitfixes.database.blacklist import Blacklist, PathBlacklist, read_list_file
from gitfixes.database.known_commits import KnownCommitIndex
from gitfixes.database.path_map import PathMap
from gitfixes.database.series import SeriesScanner, default_output_name, write_entries

__all__ = [
    "KnownCommitIndex",
    "Blacklist",
    "PathBlacklist",
    "PathMap",
    "SeriesScanner",
    "read_list_file",
    "write_entries",
    "default_output_name",
]
