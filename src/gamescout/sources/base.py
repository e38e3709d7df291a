"""Base interface shared by every source adapter.

An adapter knows where one vendor keeps track of its installs. It only
has to yield ``RawCandidate`` objects from ``candidates()``; the shared
``scan()`` pipeline turns them into complete ``InstallRecord`` objects:

    1. Skip launchers and utilities (``Classifier.is_launcher_or_utility``).
    2. Skip candidates whose canonical path (or ``dedup_key``) was already
       produced by this adapter (registry and directory methods often
       overlap). A key is only taken once its record survives step 4.
    3. Resolve the executable: the vendor-declared one when it exists,
       otherwise ``ExecutableSelector.select``.
    4. Measure the install directory and read its creation time.
    5. Mine usage with the adapter's ``UsageExtractor``.

Any exception while enriching one candidate is logged at WARNING and the
candidate skipped; the rest of the scan continues. A missing vendor root
is not an error: ``candidates()`` simply yields nothing.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable

from gamescout.discovery.classifier import Classifier
from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.executables import ExecutableSelector
from gamescout.discovery.filesystem import canonical_path, creation_time, directory_size
from gamescout.discovery.models import InstallRecord, RawCandidate, Source
from gamescout.usage.base import UsageExtractor
from gamescout.usage.heuristics import DEFAULT_THRESHOLDS, UnitThresholds
from gamescout.usage.text_scan import ScanLimits

logger = logging.getLogger(__name__)


@dataclass
class ScanContext:
    """Everything an adapter needs for one discovery run.

    Attributes:
        env: Well-known folders and registry of the scanned host.
        selector: Executable selector shared by all adapters.
        thresholds: Unit thresholds for text-mined playtime values.
        scan_limits: Read bounds for the text usage heuristic.
        extra_steam_libraries: Steam library folders not listed in
            ``libraryfolders.vdf``.
        cancel: Set to stop the run early.
    """

    env: HostEnvironment
    selector: ExecutableSelector = field(default_factory=ExecutableSelector)
    thresholds: UnitThresholds = DEFAULT_THRESHOLDS
    scan_limits: ScanLimits = field(default_factory=ScanLimits)
    extra_steam_libraries: list[Path] = field(default_factory=list)
    cancel: threading.Event = field(default_factory=threading.Event)

    def cancelled(self) -> bool:
        return self.cancel.is_set()


class SourceAdapter(ABC):
    """Abstract base class for per-vendor install discovery.

    Subclasses set ``source`` and implement ``candidates()``. Those that
    can mine usage override ``usage_extractor()``.

    Attributes:
        source: The ``Source`` tag stamped on every produced record.
        default_accept: Classifier default for names that match neither
            the accept nor the reject catalog.
    """

    source: Source
    default_accept: bool = True

    def __init__(self) -> None:
        self.classifier = Classifier(default_accept=self.default_accept)

    @property
    def name(self) -> str:
        return self.source.value

    @abstractmethod
    def candidates(self, context: ScanContext) -> Iterable[RawCandidate]:
        """Yield possible installs for this vendor.

        Must not raise for a missing vendor root; yield nothing instead.
        Per-entry read failures should be logged and skipped.
        """

    def usage_extractor(self, context: ScanContext) -> UsageExtractor | None:
        """Return the extractor used to mine usage, or ``None``."""
        return None

    def admit(self, candidate: RawCandidate) -> bool:
        """Final name filter applied to every candidate."""
        return not self.classifier.is_launcher_or_utility(candidate.name)

    def dedup_key(self, candidate: RawCandidate) -> str | None:
        """Secondary identity within this adapter, or ``None`` for path only."""
        return None

    def scan(self, context: ScanContext) -> list[InstallRecord]:
        """Locate and fully enrich this vendor's installs.

        Args:
            context: The run's environment, selector and cancel event.

        Returns:
            An adapter-local list of records, unique by canonical path.
        """
        extractor = self.usage_extractor(context)
        records: list[InstallRecord] = []
        seen: set[str] = set()
        seen_keys: set[str] = set()

        for candidate in self.candidates(context):
            if context.cancelled():
                logger.debug("%s scan cancelled", self.name)
                break
            key = canonical_path(candidate.install_path)
            extra_key = self.dedup_key(candidate)
            if key in seen or extra_key in seen_keys or not self.admit(candidate):
                continue
            try:
                record = self._enrich(candidate, context, extractor)
            except Exception:
                logger.warning(
                    "Skipping %s candidate %s", self.name, candidate.install_path,
                    exc_info=True,
                )
                continue
            if record is not None:
                seen.add(key)
                if extra_key is not None:
                    seen_keys.add(extra_key)
                records.append(record)

        logger.debug("%s: %d installs", self.name, len(records))
        return records

    def _enrich(
        self,
        candidate: RawCandidate,
        context: ScanContext,
        extractor: UsageExtractor | None,
    ) -> InstallRecord | None:
        executable = candidate.executable
        if executable is None or not executable.is_file():
            executable = context.selector.select(
                candidate.install_path, candidate.name, self.source, context.cancel,
            )
        if executable is None and candidate.require_executable:
            return None

        size = directory_size(candidate.install_path, context.cancel)
        if candidate.min_size_bytes and size <= candidate.min_size_bytes:
            return None

        hours = None
        last_active = None
        if extractor is not None:
            stats = extractor.extract(replace(candidate, executable=executable))
            hours = stats.hours
            last_active = stats.last_active

        return InstallRecord(
            name=candidate.name,
            source=self.source,
            install_path=candidate.install_path,
            executable=executable,
            install_date=creation_time(candidate.install_path),
            size_bytes=size,
            last_active=last_active,
            usage_hours=hours,
        )
