"""Base interface for usage-stat extractors.

Each source mines usage differently, but every extractor honours the
same contract: ``extract()`` returns a ``UsageStats`` and never raises.
Subclasses implement ``_extract()``; any exception escaping it is logged
and converted to an empty result here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from gamescout.discovery.models import EMPTY_USAGE, RawCandidate, UsageStats

logger = logging.getLogger(__name__)


class UsageExtractor(ABC):
    """Abstract base class for per-source usage miners."""

    def extract(self, candidate: RawCandidate) -> UsageStats:
        """Return best-effort usage statistics for ``candidate``.

        Args:
            candidate: The install, with its executable already resolved
                where one was found.

        Returns:
            ``UsageStats`` with whatever could be recovered; both fields
            ``None`` on failure.
        """
        try:
            return self._extract(candidate)
        except Exception:
            logger.warning(
                "Usage extraction failed for %s (%s)",
                candidate.name, candidate.source.value, exc_info=True,
            )
            return EMPTY_USAGE

    @abstractmethod
    def _extract(self, candidate: RawCandidate) -> UsageStats:
        """Source-specific extraction. May raise; ``extract`` guards it."""


class ChainedUsage(UsageExtractor):
    """Run extractors in order, filling each field from the first hit."""

    def __init__(self, *extractors: UsageExtractor) -> None:
        self.extractors = extractors

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        hours = None
        last_active = None
        for extractor in self.extractors:
            stats = extractor.extract(candidate)
            if hours is None:
                hours = stats.hours
            if last_active is None:
                last_active = stats.last_active
            if hours is not None and last_active is not None:
                break
        return UsageStats(hours=hours, last_active=last_active)
