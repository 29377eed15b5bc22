"""GitFixes - find commits that fix tracked changes and route them to owners."""

__version__ = "0.3.0"
