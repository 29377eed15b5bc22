"""Git repository access."""

from gitfixes.extraction.git_extractor import GitExtractor, RepositoryError

__all__ = ["GitExtractor", "RepositoryError"]
