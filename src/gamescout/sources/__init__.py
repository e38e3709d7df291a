"""Per-vendor source adapters.

Each adapter locates one storefront's installs and returns fully
enriched ``InstallRecord`` objects from ``scan()``. ``build_adapters()``
returns the enabled adapters in deduplication priority order.

Public API::

    from gamescout.sources import ScanContext, build_adapters

    context = ScanContext(env=HostEnvironment.detect())
    for adapter in build_adapters():
        for record in adapter.scan(context):
            print(record.name, record.install_path)
"""

from __future__ import annotations

from gamescout.sources.base import ScanContext, SourceAdapter
from gamescout.sources.registry import SOURCE_PROFILES, SourceProfile, build_adapters

__all__ = [
    "SOURCE_PROFILES",
    "ScanContext",
    "SourceAdapter",
    "SourceProfile",
    "build_adapters",
]
