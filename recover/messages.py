"""Message records, reaction filtering and attributedBody text recovery for batches."""

import re
import sqlite3
import sys
from dataclasses import dataclass, replace
from datetime import datetime

from . import chatdb
from .extract import extract
from .outcome import RawBlob
from .utils import macos_to_datetime

REACTION_RE = re.compile(
    r'^(Loved|Liked|Disliked|Laughed at|Emphasized|Questioned|Reacted \S+ to|Removed an? .+? from) '
    r'["\u201c](.*)["\u201d]$',
    re.DOTALL | re.IGNORECASE,
)


@dataclass(frozen=True)
class Message:
    id: int
    guid: str
    text: str | None
    sender: str | None
    is_from_me: bool
    date: datetime
    service: str = "iMessage"
    chat_id: str | None = None
    is_read: bool = False

    @property
    def has_text(self):
        return bool(self.text and self.text.strip())


def message_from_row(row: dict) -> Message:
    return Message(
        id=row["id"],
        guid=row["guid"],
        text=row["text"],
        sender=row["sender"],
        is_from_me=bool(row["is_from_me"]),
        date=macos_to_datetime(row["date"]),
        service=row.get("service") or "iMessage",
        chat_id=row.get("chat_id"),
        is_read=bool(row.get("is_read")),
    )


def is_reaction(msg: Message) -> bool:
    """Tapback messages ('Loved "..."') carry a quote of another message, not content."""
    if not msg.text:
        return False
    return bool(REACTION_RE.match(msg.text.strip()))


def is_text_message(msg: Message, filter_reactions=True) -> bool:
    if not msg.has_text:
        return False
    return not (filter_reactions and is_reaction(msg))


def filter_text_messages(messages, filter_reactions=True) -> list[Message]:
    return [m for m in messages if is_text_message(m, filter_reactions)]


def recover_text(msg: Message, conn) -> Message:
    """Return `msg` with text recovered from its attributedBody, if it has none.

    Messages that already have text, or whose blob yields nothing, come back
    unchanged.
    """
    if msg.has_text:
        return msg
    try:
        blob = chatdb.fetch_attributed_body(conn, msg.id)
    except sqlite3.Error as e:
        print(f"  Warning: could not read attributedBody for message {msg.id}: {e}", file=sys.stderr)
        return msg
    if blob is None:
        return msg
    text = extract(RawBlob(msg.id, blob))
    if not text:
        return msg
    return replace(msg, text=text)


def enhance_messages(messages, conn) -> list[Message]:
    """Recover text for every message in `messages` over an open connection."""
    return [recover_text(m, conn) for m in messages]


def enhance_batch(messages, db_path=chatdb.DEFAULT_CHAT_DB) -> list[Message]:
    """Open chat.db once, recover text for the batch, always close the connection."""
    conn = chatdb.get_connection(db_path)
    try:
        return enhance_messages(messages, conn)
    finally:
        conn.close()


def fetch_and_enhance(handle, db_path=chatdb.DEFAULT_CHAT_DB, since_dt=None, until_dt=None,
                      limit=None, filter_reactions=True) -> list[Message]:
    """Fetch a contact's messages, recover missing text, and keep only text messages.

    Returned newest first.
    """
    conn = chatdb.get_connection(db_path)
    try:
        rows = chatdb.fetch_messages(conn, handle, since_dt, until_dt, limit)
        messages = enhance_messages([message_from_row(r) for r in rows], conn)
    finally:
        conn.close()
    return filter_text_messages(messages, filter_reactions)
