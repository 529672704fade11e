"""Tests for recover/export.py."""

from datetime import datetime, timedelta

from conftest import CONTACT, add_message, marker_blob
from recover.export import export_history, format_header, format_message, render_markdown
from recover.messages import Message


def _msg(text, when, is_from_me=False, msg_id=1):
    return Message(id=msg_id, guid=f"g{msg_id}", text=text, sender=CONTACT,
                   is_from_me=is_from_me, date=when)


class TestFormatMessage:
    def test_them(self):
        msg = _msg("Hey!", datetime(2026, 2, 6, 15, 5))
        assert format_message(msg) == "**Feb 6, 2026, 3:05 PM - Them:**\nHey!\n"

    def test_me_morning(self):
        msg = _msg("Morning", datetime(2026, 2, 6, 9, 30), is_from_me=True)
        assert format_message(msg) == "**Feb 6, 2026, 9:30 AM - Me:**\nMorning\n"

    def test_midnight_hour(self):
        msg = _msg("late", datetime(2026, 2, 6, 0, 7))
        assert format_message(msg).startswith("**Feb 6, 2026, 12:07 AM")


class TestFormatHeader:
    def test_counts_and_range(self):
        msgs = [_msg("a", datetime(2025, 1, 2, 10)), _msg("b", datetime(2025, 3, 4, 10))]
        header = format_header(CONTACT, msgs, generated_at=datetime(2025, 3, 5, 8, 0, 0))
        assert header.startswith(f"# Message History: {CONTACT}\n\n")
        assert "**Total Messages:** 2\n" in header
        assert "**Date Range:** 1/2/2025 - 3/4/2025\n" in header
        assert "**Filtered:**" not in header
        assert "**Generated:** 03/05/2025 08:00:00\n" in header
        assert header.endswith("\n\n---\n\n")

    def test_filtered_line(self):
        header = format_header(CONTACT, [], start_dt=datetime(2025, 1, 1), end_dt=datetime(2025, 2, 1))
        assert "**Filtered:** From 1/1/2025 To 2/1/2025\n" in header
        assert "**Date Range:** (no messages)" in header

    def test_thousands_separator(self):
        msgs = [_msg("x", datetime(2025, 1, 1)) for _ in range(1200)]
        assert "**Total Messages:** 1,200" in format_header(CONTACT, msgs)


class TestRenderMarkdown:
    def test_newest_first(self):
        base = datetime(2025, 5, 1, 12, 0)
        msgs = [
            _msg("first", base, msg_id=1),
            _msg("third", base + timedelta(hours=2), is_from_me=True, msg_id=3),
            _msg("second", base + timedelta(hours=1), msg_id=2),
        ]
        body = render_markdown(CONTACT, msgs).split("---\n\n", 1)[1]
        assert body.index("third") < body.index("second") < body.index("first")
        assert "- Me:**\nthird\n" in body


class TestExportHistory:
    def test_writes_recovered_messages(self, chat_db, tmp_path, capsys):
        now = datetime.now()
        add_message(chat_db, text="plain", when=now - timedelta(minutes=10))
        add_message(chat_db, text=None, body=marker_blob("only in attributedBody"), when=now)
        add_message(chat_db, text='Liked "plain"', when=now - timedelta(minutes=5))
        output = tmp_path / "out" / "conversation.md"

        count = export_history(CONTACT, output, chat_db)

        assert count == 2
        text = output.read_text(encoding="utf-8")
        assert "only in attributedBody" in text
        assert "plain" in text
        assert "Liked" not in text
        assert text.index("only in attributedBody") < text.index("\nplain\n")
        assert "Found 2 text messages" in capsys.readouterr().out

    def test_keeps_reactions_when_disabled(self, chat_db, tmp_path):
        add_message(chat_db, text='Liked "plain"')
        output = tmp_path / "conversation.md"
        assert export_history(CONTACT, output, chat_db, filter_reactions=False) == 1
        assert 'Liked "plain"' in output.read_text(encoding="utf-8")
