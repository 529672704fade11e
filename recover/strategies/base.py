"""Base class for text recovery strategies."""

from abc import ABC, abstractmethod

from ..outcome import ExtractionOutcome, RawBlob


class Strategy(ABC):
    name: str  # "marker", "archive", etc.
    description: str  # Human-readable

    @abstractmethod
    def extract(self, blob: RawBlob) -> ExtractionOutcome:
        ...

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"
