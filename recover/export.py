"""Markdown export of one contact's message history."""

from datetime import datetime
from pathlib import Path

from .messages import fetch_and_enhance


def _format_timestamp(dt):
    """'Feb 6, 2026, 3:05 PM' without platform-specific strftime flags."""
    hour = dt.strftime("%I").lstrip("0") or "12"
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}, {hour}:{dt.strftime('%M %p')}"


def _format_date(dt):
    return f"{dt.month}/{dt.day}/{dt.year}"


def format_message(msg):
    sender = "Me" if msg.is_from_me else "Them"
    return f"**{_format_timestamp(msg.date)} - {sender}:**\n{msg.text}\n"


def format_header(contact, messages, start_dt=None, end_dt=None, generated_at=None):
    generated_at = generated_at or datetime.now()
    lines = [f"# Message History: {contact}", ""]
    lines.append(f"**Total Messages:** {len(messages):,}")
    if messages:
        dates = [m.date for m in messages]
        lines.append(f"**Date Range:** {_format_date(min(dates))} - {_format_date(max(dates))}")
    else:
        lines.append("**Date Range:** (no messages)")
    if start_dt or end_dt:
        parts = []
        if start_dt:
            parts.append(f"From {_format_date(start_dt)}")
        if end_dt:
            parts.append(f"To {_format_date(end_dt)}")
        lines.append(f"**Filtered:** {' '.join(parts)}")
    lines.append(f"**Generated:** {generated_at.strftime('%m/%d/%Y %H:%M:%S')}")
    lines.extend(["", "---", "", ""])
    return "\n".join(lines)


def render_markdown(contact, messages, start_dt=None, end_dt=None, generated_at=None):
    """Render messages newest first under a metadata header."""
    ordered = sorted(messages, key=lambda m: m.date, reverse=True)
    header = format_header(contact, ordered, start_dt, end_dt, generated_at)
    return header + "\n".join(format_message(m) for m in ordered)


def export_history(contact, output_path, db_path, start_dt=None, end_dt=None, filter_reactions=True):
    """Fetch, recover and write a contact's history to `output_path`. Returns the message count."""
    print(f"Fetching messages from {contact}...")
    messages = fetch_and_enhance(
        contact, db_path, since_dt=start_dt, until_dt=end_dt, filter_reactions=filter_reactions,
    )
    count = len(messages)
    print(f"  Found {count} text message{'s' if count != 1 else ''}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_markdown(contact, messages, start_dt, end_dt), encoding="utf-8")
    print(f"  Exported to {output_path}")
    return count
