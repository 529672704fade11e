"""Text recovery strategies, most reliable first."""

from .archive import ArchiveStrategy
from .base import Strategy
from .marker import MarkerStrategy
from .segments import SegmentStrategy

STRATEGIES = [MarkerStrategy(), ArchiveStrategy(), SegmentStrategy()]

STRATEGY_NAMES = [s.name for s in STRATEGIES]

__all__ = ["STRATEGIES", "STRATEGY_NAMES", "Strategy",
           "MarkerStrategy", "ArchiveStrategy", "SegmentStrategy"]
