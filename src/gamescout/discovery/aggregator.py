"""Cross-source aggregation: fan out, merge, deduplicate, order.

Discovery Algorithm:
    1. Submit every adapter's ``scan()`` to a thread pool. Each adapter
       fills its own list; nothing is shared between workers.
    2. Wait for all of them, a caller's cancel event, or a timeout.
       On cancel or timeout the run's event is set so adapters stop
       early, and only the buffers that completed are merged.
    3. Merge buffers in adapter priority order and keep the first record
       per canonical install path. Adapter priority, not completion
       order, decides which source a shared install is attributed to.
    4. Order by usage hours descending (absent counts as zero), then by
       name in code-point order.
    5. Count records per source.

An adapter that raises contributes nothing; the error is logged and the
other adapters' results are still returned.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Iterable, Sequence

from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.models import Catalog, InstallRecord, Source
from gamescout.launcher import ProcessLauncher
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
# How often the wait loop checks the caller's cancel event.
_POLL_SECONDS = 0.1
# How long cancelled adapters get to hand back their partial buffers.
_CANCEL_GRACE_SECONDS = 2.0


def sort_key(record: InstallRecord) -> tuple[float, str]:
    """Usage hours descending (``None`` as zero), then name ascending."""
    return (-(record.usage_hours or 0.0), record.name)


def merge_buffers(buffers: Iterable[Sequence[InstallRecord]]) -> list[InstallRecord]:
    """Concatenate buffers in order, keeping the first record per path."""
    seen: set[str] = set()
    merged: list[InstallRecord] = []
    for buffer in buffers:
        for record in buffer:
            key = record.canonical_path
            if key in seen:
                continue
            seen.add(key)
            merged.append(record)
    return merged


def count_by_source(records: Iterable[InstallRecord]) -> dict[str, int]:
    """Per-source record counts keyed by display label, priority order."""
    counts = {source.value: 0 for source in Source}
    for record in records:
        counts[record.source.value] += 1
    return {label: n for label, n in counts.items() if n}


def build_catalog(
    buffers: Iterable[Sequence[InstallRecord]], cancelled: bool = False,
) -> Catalog:
    """Merge priority-ordered buffers into an ordered ``Catalog``."""
    records = sorted(merge_buffers(buffers), key=sort_key)
    return Catalog(
        records=tuple(records),
        counts_by_source=count_by_source(records),
        cancelled=cancelled,
    )


class Aggregator:
    """Runs source adapters concurrently and merges their results.

    Usage::

        aggregator = Aggregator(build_adapters())
        catalog = aggregator.discover(timeout=60)
        for record in aggregator.find("witcher"):
            print(record.name, record.source.value)

    Attributes:
        adapters: Adapters in dedup priority order.
        context: Template for each run's ``ScanContext``. Every run gets
            a copy with a fresh cancel event.
        workers: Thread pool size.
        launcher: Collaborator used by ``launch()``.
    """

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        context: ScanContext | None = None,
        workers: int = DEFAULT_WORKERS,
        launcher: ProcessLauncher | None = None,
    ) -> None:
        self.adapters = list(adapters)
        self.context = context or ScanContext(env=HostEnvironment.detect())
        self.workers = max(1, workers)
        self.launcher = launcher or ProcessLauncher()

    def discover(
        self,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Catalog:
        """Run every adapter and return a fresh catalog.

        Args:
            cancel: Optional event the caller sets to stop the run.
            timeout: Optional wall-clock limit in seconds.

        Returns:
            The merged catalog. ``cancelled`` is True when the run was
            stopped early and the catalog is partial.
        """
        run = replace(self.context, cancel=threading.Event())
        started = time.monotonic()
        deadline = None if timeout is None else started + timeout
        buffers: list[list[InstallRecord] | None] = [None] * len(self.adapters)
        stopped = False

        executor = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="gamescout-scan",
        )
        try:
            futures: dict[Future, int] = {
                executor.submit(adapter.scan, run): index
                for index, adapter in enumerate(self.adapters)
            }
            pending = set(futures)
            while pending:
                if (cancel is not None and cancel.is_set()) or (
                    deadline is not None and time.monotonic() >= deadline
                ):
                    stopped = True
                    break
                done, pending = wait(pending, timeout=_POLL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    self._collect(future, futures[future], buffers)

            if stopped:
                logger.info("Discovery stopped early; returning partial results")
                run.cancel.set()
                done, pending = wait(pending, timeout=_CANCEL_GRACE_SECONDS)
                for future in done:
                    self._collect(future, futures[future], buffers)
        finally:
            executor.shutdown(wait=not stopped, cancel_futures=True)

        catalog = build_catalog((b for b in buffers if b is not None), cancelled=stopped)
        logger.info(
            "Discovered %d installs from %d sources in %.1fs",
            len(catalog), len(catalog.counts_by_source), time.monotonic() - started,
        )
        return catalog

    def _collect(
        self, future: Future, index: int, buffers: list[list[InstallRecord] | None],
    ) -> None:
        adapter = self.adapters[index]
        try:
            buffers[index] = list(future.result())
        except Exception:
            logger.warning("%s adapter failed", adapter.name, exc_info=True)
            buffers[index] = []

    def find(self, pattern: str, timeout: float | None = None) -> list[InstallRecord]:
        """Run a fresh discovery and filter names by substring.

        Matching is case-insensitive. The catalog's order is kept.

        Args:
            pattern: Substring to look for in record names.
            timeout: Wall-clock limit passed to ``discover()``.
        """
        needle = pattern.casefold()
        catalog = self.discover(timeout=timeout)
        return [record for record in catalog if needle in record.name.casefold()]

    def launch(self, record: InstallRecord) -> None:
        """Hand ``record`` to the launcher collaborator."""
        self.launcher.launch(record)
