"""Length-prefixed NSString field located by its class-name marker."""

from ..outcome import INSUFFICIENT_DATA, NO_TEXT, NOT_APPLICABLE, Recovered
from .base import Strategy

MARKER = b"NSString"
HEADER_SKIP = 5  # bytes between the marker and the length field
EXTENDED_LENGTH = 0x81  # next two bytes hold a little-endian uint16 length


class MarkerStrategy(Strategy):
    """
    Read the text that follows the "NSString" marker.

    The attributedBody typedstream stores the string as a length byte after a
    5-byte preamble. Lengths above 128 are flagged with 0x81 and stored in
    the following two bytes. Any mismatch is a failure, never a guess.
    """
    name = "marker"
    description = "NSString marker + length prefix"

    def extract(self, blob):
        data = blob.data
        offset = data.find(MARKER)
        if offset == -1:
            return NOT_APPLICABLE

        content_start = offset + len(MARKER) + HEADER_SKIP
        if content_start >= len(data):
            return INSUFFICIENT_DATA

        length_byte = data[content_start]
        if length_byte == EXTENDED_LENGTH:
            if content_start + 3 > len(data):
                return INSUFFICIENT_DATA
            length = int.from_bytes(data[content_start + 1:content_start + 3], "little")
            text_start = content_start + 3
        else:
            length = length_byte
            text_start = content_start + 1

        if text_start + length > len(data):
            return INSUFFICIENT_DATA

        try:
            text = data[text_start:text_start + length].decode("utf-8").strip()
        except UnicodeDecodeError:
            return NO_TEXT
        if not text:
            return NO_TEXT
        return Recovered(text)
