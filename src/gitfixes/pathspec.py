"""Path prefix helpers shared by scope filtering and blacklists."""

from typing import Iterable


def normalize_prefix(prefix: str) -> str:
    """Strip surrounding whitespace, a leading ``./`` and trailing slashes."""
    prefix = prefix.strip()
    while prefix.startswith("./"):
        prefix = prefix[2:]
    return prefix.rstrip("/")


def is_under(path: str, prefix: str) -> bool:
    """Return True if ``path`` equals ``prefix`` or lies in the subtree below it."""
    prefix = normalize_prefix(prefix)
    if not prefix or prefix == ".":
        return True
    return path == prefix or path.startswith(prefix + "/")


def is_under_any(path: str, prefixes: Iterable[str]) -> bool:
    return any(is_under(path, prefix) for prefix in prefixes)
