"""Who touched these paths: ownership lookup for revisions and paths."""

from pathlib import Path
from typing import Iterable, List, Set

import structlog

from gitfixes.database import PathMap, read_list_file
from gitfixes.models import OwnerCount

logger = structlog.get_logger(__name__)


def load_ignore(values: Iterable[str]) -> Set[str]:
    """Build the ignore set.

    A value naming a readable file contributes the addresses listed in it;
    any other value is taken as an address itself.
    """
    ignore: Set[str] = set()
    for value in values:
        items = read_list_file(Path(value)) if Path(value).is_file() else None
        if items is None:
            ignore.add(value)
        else:
            ignore.update(items)
    return ignore


class OwnershipQuery:
    """Ranks the people who contributed to the paths behind a set of arguments."""

    def __init__(self, repository, path_map: PathMap) -> None:
        """Initialize the query.

        Args:
            repository: Object providing ``changed_paths(revision)``,
                normally a GitExtractor
            path_map: Path-ownership database
        """
        self.repository = repository
        self.path_map = path_map

    def collect_paths(self, params: Iterable[str]) -> List[str]:
        """Expand arguments into paths.

        Each argument is first tried as a revision, contributing the paths
        that commit changed. Arguments that do not resolve are paths.
        """
        paths: List[str] = []
        for param in params:
            changed = self.repository.changed_paths(param)
            if changed is None:
                paths.append(param.rstrip("/"))
            else:
                logger.debug("revision_paths_collected", revision=param, paths=len(changed))
                paths.extend(changed)
        return paths

    def run(self, params: Iterable[str], ignore: Iterable[str] = ()) -> List[OwnerCount]:
        return self.path_map.rank(self.collect_paths(params), ignore=set(ignore))
