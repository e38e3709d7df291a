"""GameScout: Unified discovery of installed games across PC storefronts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
