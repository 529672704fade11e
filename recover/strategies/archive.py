"""Decode attributedBody as an archived object graph and search it for text.

Two archive encodings show up in chat.db:
  - NSKeyedArchiver property lists (bplist00), decoded with plistlib.
    Objects live in a flat $objects table and reference each other by UID.
  - NSArchiver typedstreams ("streamtyped" header), decoded with pytypedstream.
    Decoded objects are walked through their instance attributes.
"""

import plistlib

import typedstream

from ..outcome import NO_TEXT, NOT_APPLICABLE, Recovered
from ..rules import ARCHIVE_METADATA_KEYS, PRIORITY_KEYS, is_message_text
from .base import Strategy

MAX_DEPTH = 10
TYPEDSTREAM_SIGNATURE = b"streamtyped"

_SCALARS = (bytes, bytearray, int, float, bool)


def _load_plist(data):
    """Return (root, objects) for a plist, or None if `data` is not one."""
    try:
        plist = plistlib.loads(data)
    except Exception:
        return None
    if isinstance(plist, dict) and isinstance(plist.get("$objects"), list) and "$top" in plist:
        return plist["$top"], plist["$objects"]
    return plist, []


def _load_typedstream(data):
    if TYPEDSTREAM_SIGNATURE not in data[:16]:
        return None
    try:
        return typedstream.unarchive_from_data(data), []
    except Exception:
        return None


def decode_graph(data):
    """Decode `data` into (root, objects). Returns None if no decoder accepts it."""
    return _load_plist(data) or _load_typedstream(data)


def _children(node):
    if isinstance(node, (dict, list, tuple)):
        return node
    if node is None or isinstance(node, _SCALARS):
        return None
    # Decoded typedstream objects expose their fields as attributes
    return getattr(node, "__dict__", None) or None


class GraphWalker:
    """Depth-bounded search of one decoded graph. Not reusable across graphs."""

    def __init__(self, objects=None, max_depth=MAX_DEPTH):
        self.objects = objects or []
        self.max_depth = max_depth
        self.deepest = 0
        # node key -> shallowest depth it was searched from
        self._seen = {}

    def search(self, node, depth=0):
        if depth > self.max_depth:
            return None
        self.deepest = max(self.deepest, depth)

        if isinstance(node, plistlib.UID):
            return self._follow(node, depth)
        if isinstance(node, str):
            text = node.strip()
            return text if is_message_text(text) else None

        children = _children(node)
        if children is None or not self._visit(id(node), depth):
            return None

        if isinstance(children, dict):
            for key in PRIORITY_KEYS:
                if key in children:
                    found = self.search(children[key], depth + 1)
                    if found:
                        return found
            for key, value in children.items():
                if key in PRIORITY_KEYS or key in ARCHIVE_METADATA_KEYS:
                    continue
                found = self.search(value, depth + 1)
                if found:
                    return found
        else:
            for item in children:
                found = self.search(item, depth + 1)
                if found:
                    return found
        return None

    def _visit(self, key, depth):
        """Record a visit. False if `key` was already searched from this depth or shallower."""
        if key in self._seen and self._seen[key] <= depth:
            return False
        self._seen[key] = depth
        return True

    def _follow(self, uid, depth):
        index = uid.data
        # UID 0 is the archiver's $null
        if index <= 0 or index >= len(self.objects) or not self._visit(("uid", index), depth):
            return None
        return self.search(self.objects[index], depth + 1)


class ArchiveStrategy(Strategy):
    name = "archive"
    description = "archived object graph walk"

    def extract(self, blob):
        decoded = decode_graph(blob.data)
        if decoded is None:
            return NOT_APPLICABLE
        root, objects = decoded
        text = GraphWalker(objects).search(root)
        if not text:
            return NO_TEXT
        return Recovered(text)
