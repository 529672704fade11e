"""Last-resort scan of the raw bytes for printable text runs."""

import re

from ..outcome import NO_TEXT, Recovered
from ..rules import MIN_SEGMENT_LENGTH, is_guid, is_message_text
from .base import Strategy

CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B-\x1F\x7F-\x9F]")

# Letters and digits (any script), whitespace, and light punctuation
SEGMENT_RE = re.compile(r"(?:[^\W_]|[\s.,!?'\";:()-])+")


def find_segments(data):
    """Return every stripped printable run in `data` that could be message text."""
    decoded = data.decode("utf-8", errors="replace")
    cleaned = CONTROL_CHARS_RE.sub(" ", decoded)
    segments = []
    for match in SEGMENT_RE.finditer(cleaned):
        segment = match.group().strip()
        if len(segment) < MIN_SEGMENT_LENGTH:
            continue
        if is_guid(segment) or not is_message_text(segment):
            continue
        segments.append(segment)
    return segments


class SegmentStrategy(Strategy):
    """
    Pick the longest plausible run of text in the blob.

    Message bodies are usually longer than the metadata fragments around
    them, so the longest run wins (later runs win ties). This is a best-effort
    guess with no correctness guarantee.
    """
    name = "segments"
    description = "longest printable segment"

    def extract(self, blob):
        segments = find_segments(blob.data)
        if not segments:
            return NO_TEXT
        longest = segments[0]
        for segment in segments[1:]:
            if len(segment) >= len(longest):
                longest = segment
        return Recovered(longest)
