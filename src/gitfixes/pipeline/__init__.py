"""Fix reference resolution and attribution pipeline."""

from gitfixes.pipeline.attribution import AttributionEngine
from gitfixes.pipeline.report import NOTHING_FOUND, format_machine, format_report
from gitfixes.pipeline.resolver import ReferenceResolver
from gitfixes.pipeline.results import DEFAULT_GROUP, ResultAggregator, RevertTracker
from gitfixes.pipeline.scope import TreeScopeFilter
from gitfixes.pipeline.session import FixesSession
from gitfixes.pipeline.who import OwnershipQuery, load_ignore

__all__ = [
    "AttributionEngine",
    "ReferenceResolver",
    "TreeScopeFilter",
    "ResultAggregator",
    "RevertTracker",
    "FixesSession",
    "OwnershipQuery",
    "load_ignore",
    "format_report",
    "format_machine",
    "NOTHING_FOUND",
    "DEFAULT_GROUP",
]
