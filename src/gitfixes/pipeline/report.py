"""Text renderings of fix-finding results."""

from typing import List

from gitfixes.pipeline.results import ResultAggregator

NOTHING_FOUND = "Nothing found"


def format_report(results: ResultAggregator) -> List[str]:
    """Render results for humans: a header per owner, then one line per fix."""
    if not results.found:
        return [NOTHING_FOUND]

    lines = []
    prefix = "\t" if results.grouping else ""

    for owner, members in results.non_empty_groups():
        if results.grouping:
            lines.append(f"{owner} ({len(members)}):")
        for result in members:
            lines.append(f"{prefix}{result.short_id} {result.subject}")
        lines.append("")

    return lines


def format_machine(results: ResultAggregator) -> List[str]:
    """Render results as ``owner;id;path;subject`` records.

    An empty result renders no records at all, not the ``Nothing found``
    line. Callers that need to tell the two apart check ``results.found``.
    """
    lines = []
    for result in results.all_results():
        lines.append(f"{result.owner};{result.commit_id};{result.source_path};{result.subject}")
    return lines
