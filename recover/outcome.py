"""Extraction inputs and tagged results."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RawBlob:
    """attributedBody bytes plus the ROWID of the message that owns them."""
    message_id: int | None
    data: bytes

    @classmethod
    def of(cls, blob, message_id=None):
        if isinstance(blob, RawBlob):
            return blob
        return cls(message_id, bytes(blob or b""))


class Reason(Enum):
    NOT_APPLICABLE = "not applicable"
    INSUFFICIENT_DATA = "insufficient data"
    NO_TEXT = "no text"


@dataclass(frozen=True)
class Recovered:
    text: str

    def __str__(self):
        return f"recovered: {self.text!r}"


@dataclass(frozen=True)
class NotRecovered:
    reason: Reason

    def __str__(self):
        return self.reason.value


NOT_APPLICABLE = NotRecovered(Reason.NOT_APPLICABLE)
INSUFFICIENT_DATA = NotRecovered(Reason.INSUFFICIENT_DATA)
NO_TEXT = NotRecovered(Reason.NO_TEXT)

ExtractionOutcome = Recovered | NotRecovered
