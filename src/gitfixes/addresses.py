"""Email address helpers shared by attribution and the series builder."""

from typing import Iterable


def email_domain(email: str) -> str:
    """Return the lowercase domain part of an address, or "" if it has none."""
    _, sep, domain = email.strip().strip("<>").partition("@")
    return domain.lower() if sep else ""


def email_domain_in(email: str, domains: Iterable[str]) -> bool:
    """Return True if the domain part of ``email`` is one of ``domains``."""
    domain = email_domain(email)
    if not domain:
        return False
    return domain in {d.lower() for d in domains}
