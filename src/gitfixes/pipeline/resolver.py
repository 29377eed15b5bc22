"""Resolution of candidate references to commit identities."""

from typing import Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


class ReferenceResolver:
    """Resolves reference tokens through the repository.

    Tokens that do not name an object resolve to None; plenty of hex-looking
    words in commit messages are not references at all. Results are
    cached per token.
    """

    def __init__(self, repository) -> None:
        """Initialize the resolver.

        Args:
            repository: Object providing ``resolve(name) -> Optional[str]``,
                normally a GitExtractor
        """
        self.repository = repository
        self._cache: Dict[str, Optional[str]] = {}

    def resolve(self, token: str) -> Optional[str]:
        """Resolve a token to a lowercase full SHA, or None."""
        if token in self._cache:
            return self._cache[token]

        resolved = self.repository.resolve(token)
        if resolved is None:
            logger.debug("reference_unresolved", token=token)
        else:
            resolved = resolved.lower()

        self._cache[token] = resolved
        return resolved
