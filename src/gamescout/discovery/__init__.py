"""Discovery and classification engine.

Locates installed games across storefronts, decides which candidates are
games, picks each one's main executable, and merges everything into one
deduplicated, ordered ``Catalog``.

``Aggregator`` lives in ``gamescout.discovery.aggregator`` and is not
re-exported here: it depends on the source adapters, which themselves
import this package.

Public API::

    from gamescout.discovery.aggregator import Aggregator
    from gamescout.sources import build_adapters

    catalog = Aggregator(build_adapters()).discover()
    for record in catalog:
        print(f"{record.name} ({record.source.value}): {record.size_mb} MB")
"""

from __future__ import annotations

from gamescout.discovery.classifier import Classifier
from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.executables import ExecutableSelector, NamingRule
from gamescout.discovery.models import Catalog, InstallRecord, RawCandidate, Source, UsageStats

__all__ = [
    "Catalog",
    "Classifier",
    "ExecutableSelector",
    "HostEnvironment",
    "InstallRecord",
    "NamingRule",
    "RawCandidate",
    "Source",
    "UsageStats",
]
