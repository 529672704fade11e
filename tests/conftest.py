"""Shared fixtures for imsg-recover tests."""

import json
import plistlib
import sqlite3
from datetime import datetime

import pytest

from recover import config
from recover.utils import datetime_to_macos

CONTACT = "+15551234567"

# Bytes a real attributedBody carries before and after the NSString field
TYPEDSTREAM_HEAD = (
    b"\x04\x0bstreamtyped\x81\xe8\x03\x84\x01@\x84\x84\x84\x12NSAttributedString\x00"
    b"\x84\x84\x08NSObject\x00\x85\x92\x84\x84\x84\x08NSString\x01\x94\x84\x01+"
)
TYPEDSTREAM_TAIL = (
    b"\x86\x84\x02iI\x01\x05\x92\x84\x84\x84\x0cNSDictionary\x00\x94\x84\x01i\x01\x92\x84\x96\x96"
    b"\x1d__kIMMessagePartAttributeName\x86\x92\x84\x84\x84\x08NSNumber\x00\x84\x84\x07NSValue"
    b"\x00\x94\x84\x01*\x84\x99\x99\x00\x86\x86\x86"
)


@pytest.fixture(autouse=True)
def instance_dir(tmp_path):
    """Create a minimal instance dir pointing at a synthetic chat.db for every test."""
    db_path = tmp_path / "chat.db"
    cfg = {"contact": CONTACT, "chat_db": str(db_path), "filter_reactions": True}
    (tmp_path / "config.json").write_text(json.dumps(cfg))
    _init_chat_db(db_path)
    config.init(tmp_path)
    return tmp_path


@pytest.fixture
def chat_db(instance_dir):
    return instance_dir / "chat.db"


def _init_chat_db(db_path):
    """Create the subset of the Messages schema the reader touches."""
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE handle (ROWID INTEGER PRIMARY KEY, id TEXT, service TEXT);
        CREATE TABLE message (
            ROWID INTEGER PRIMARY KEY,
            guid TEXT,
            text TEXT,
            attributedBody BLOB,
            handle_id INTEGER,
            is_from_me INTEGER DEFAULT 0,
            date INTEGER,
            service TEXT,
            is_read INTEGER DEFAULT 0
        );
        CREATE TABLE chat (ROWID INTEGER PRIMARY KEY, chat_identifier TEXT, display_name TEXT);
        CREATE TABLE chat_message_join (chat_id INTEGER, message_id INTEGER);
    """)
    conn.commit()
    conn.close()


def add_message(db_path, text=None, body=None, is_from_me=False, when=None,
                handle=CONTACT, service="SMS"):
    """Insert one message (and its handle/chat if new). Returns the message ROWID."""
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    row = cur.execute("SELECT ROWID FROM handle WHERE id = ?", (handle,)).fetchone()
    if row:
        handle_id = row[0]
    else:
        cur.execute("INSERT INTO handle (id, service) VALUES (?, ?)", (handle, service))
        handle_id = cur.lastrowid
    row = cur.execute("SELECT ROWID FROM chat WHERE chat_identifier = ?", (handle,)).fetchone()
    if row:
        chat_id = row[0]
    else:
        cur.execute("INSERT INTO chat (chat_identifier) VALUES (?)", (handle,))
        chat_id = cur.lastrowid
    when = when or datetime.now()
    cur.execute(
        "INSERT INTO message (guid, text, attributedBody, handle_id, is_from_me, date, service)"
        " VALUES (?, ?, ?, ?, ?, ?, ?)",
        (f"guid-{handle}-{when.timestamp()}", text, body, handle_id, int(is_from_me),
         datetime_to_macos(when), service),
    )
    rowid = cur.lastrowid
    cur.execute("INSERT INTO chat_message_join (chat_id, message_id) VALUES (?, ?)", (chat_id, rowid))
    conn.commit()
    conn.close()
    return rowid


def length_prefix(n):
    if n < 0x80:
        return bytes([n])
    return b"\x81" + n.to_bytes(2, "little")


def marker_blob(text):
    """A typedstream-shaped attributedBody holding `text`."""
    encoded = text.encode("utf-8")
    return TYPEDSTREAM_HEAD + length_prefix(len(encoded)) + encoded + TYPEDSTREAM_TAIL


def keyed_archive(text):
    """An NSKeyedArchiver plist of an NSMutableAttributedString holding `text`."""
    uid = plistlib.UID
    objects = [
        "$null",
        {"NSString": uid(2), "NSAttributes": uid(4), "$class": uid(7)},
        {"NS.string": text, "$class": uid(3)},
        {"$classname": "NSMutableString", "$classes": ["NSMutableString", "NSString", "NSObject"]},
        {"NS.keys": [uid(5)], "NS.objects": [uid(6)], "$class": uid(8)},
        "__kIMMessagePartAttributeName",
        0,
        {"$classname": "NSMutableAttributedString",
         "$classes": ["NSMutableAttributedString", "NSAttributedString", "NSObject"]},
        {"$classname": "NSDictionary", "$classes": ["NSDictionary", "NSObject"]},
    ]
    archive = {
        "$version": 100000,
        "$archiver": "NSKeyedArchiver",
        "$top": {"root": uid(1)},
        "$objects": objects,
    }
    return plistlib.dumps(archive, fmt=plistlib.FMT_BINARY)
