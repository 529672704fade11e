"""Rejection rules for Apple metadata strings embedded in attributedBody.

Every strategy asks `is_message_text()` before returning a candidate it found
by searching, so the rules below are the only place metadata is recognized.
"""

import re

MIN_TEXT_LENGTH = 2
MIN_SEGMENT_LENGTH = 4

REJECTED_PREFIXES = ("kIM", "__kIM")

# "NS..." is only metadata when it names an attribute (NSAttributedString etc.)
ATTRIBUTE_CLASS_PREFIX = "NS"
ATTRIBUTE_CLASS_MARKER = "Attribute"

REJECTED_SUBSTRINGS = ("AttributeName",)

REJECTED_EXACT = frozenset({"NSString", "NSParagraphStyle"})

GUID_RE = re.compile(r"[0-9A-Fa-f-]{36}")

# Keys the keyed archiver uses for its own bookkeeping, never message content
ARCHIVE_METADATA_KEYS = frozenset({"$class", "$classes", "$classname", "$archiver", "$version"})

# Checked before any other key when walking a decoded archive
PRIORITY_KEYS = ("NSString", "NS.string", "__kIMMessagePartAttributeName", "string")


def is_guid(text):
    return bool(GUID_RE.fullmatch(text))


def is_message_text(text) -> bool:
    """True if `text` looks like a message body rather than archive metadata."""
    if not isinstance(text, str) or len(text) < MIN_TEXT_LENGTH:
        return False
    if text.startswith(REJECTED_PREFIXES):
        return False
    if text.startswith(ATTRIBUTE_CLASS_PREFIX) and ATTRIBUTE_CLASS_MARKER in text:
        return False
    if is_guid(text):
        return False
    if any(s in text for s in REJECTED_SUBSTRINGS):
        return False
    if text in REJECTED_EXACT:
        return False
    return any(c.isalnum() for c in text)
