"""Commit message parsing."""

from gitfixes.parsing.message import MessageParser, revert_target, scan_tokens

__all__ = ["MessageParser", "scan_tokens", "revert_target"]
