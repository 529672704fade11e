"""Read-only access to the Messages database (chat.db)."""

import sqlite3
from pathlib import Path

from .utils import datetime_to_macos

DEFAULT_CHAT_DB = Path.home() / "Library" / "Messages" / "chat.db"

MESSAGE_COLUMNS = (
    "id", "guid", "text", "is_from_me", "date", "service", "sender", "chat_id", "is_read",
)


def get_connection(db_path=DEFAULT_CHAT_DB):
    """
    Get a read-only connection to the Messages database.

    Raises FileNotFoundError if the database is missing and PermissionError
    (with Full Disk Access instructions) if it cannot be opened.
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"Messages database not found at {db_path}")

    try:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
        conn.execute("SELECT 1 FROM message LIMIT 1")
        return conn
    except sqlite3.DatabaseError as e:
        raise PermissionError(
            f"Unable to open Messages database: {e}\n"
            "Grant Full Disk Access:\n"
            "  System Settings > Privacy & Security > Full Disk Access > Add your terminal app"
        ) from e


def fetch_attributed_body(conn, message_id):
    """Return the attributedBody blob for one message ROWID, or None."""
    row = conn.execute(
        "SELECT attributedBody FROM message WHERE ROWID = ?", (message_id,)
    ).fetchone()
    if not row or row[0] is None:
        return None
    return bytes(row[0])


def fetch_messages(conn, handle, since_dt=None, until_dt=None, limit=None):
    """
    Fetch messages exchanged with `handle` (phone number or email), newest first.

    Returns a list of dicts keyed by MESSAGE_COLUMNS. `text` may be None; the
    attributedBody is not loaded here.
    """
    query = """
        SELECT m.ROWID, m.guid, m.text, m.is_from_me, m.date, m.service,
               h.id, c.chat_identifier, m.is_read
        FROM message m
        JOIN handle h ON m.handle_id = h.ROWID
        LEFT JOIN chat_message_join cmj ON m.ROWID = cmj.message_id
        LEFT JOIN chat c ON cmj.chat_id = c.ROWID
        WHERE h.id = ?
    """
    params = [handle]
    if since_dt:
        query += " AND m.date >= ?"
        params.append(datetime_to_macos(since_dt))
    if until_dt:
        query += " AND m.date < ?"
        params.append(datetime_to_macos(until_dt))
    query += " ORDER BY m.date DESC"
    if limit:
        query += " LIMIT ?"
        params.append(int(limit))
    rows = conn.execute(query, params).fetchall()
    return [dict(zip(MESSAGE_COLUMNS, row)) for row in rows]
