"""Time helpers for chat.db timestamps and CLI date arguments."""

import re
from datetime import datetime, timedelta

APPLE_EPOCH_OFFSET = 978307200  # seconds between 1970-01-01 and 2001-01-01

# chat.db switched from seconds to nanoseconds in macOS 10.13
_NANOSECOND_THRESHOLD = 10 ** 11


def parse_since(since_str):
    """
    Parse relative time string like '3d', '1w', '2h' into datetime.

    Supported units:
        h - hours
        d - days
        w - weeks
        m - months (30 days)

    Returns None if since_str is empty.
    Raises ValueError if the format is invalid.
    """
    if not since_str:
        return None

    match = re.match(r'^(\d+)([dhwm])$', since_str.lower())
    if not match:
        raise ValueError(f"Invalid --since format '{since_str}'. Use format like '3d', '1w', '2h', '1m'")

    amount = int(match.group(1))
    unit = match.group(2)

    now = datetime.now()
    if unit == 'h':
        return now - timedelta(hours=amount)
    if unit == 'd':
        return now - timedelta(days=amount)
    if unit == 'w':
        return now - timedelta(weeks=amount)
    return now - timedelta(days=amount * 30)


def parse_date(date_str):
    """Parse YYYY-MM-DD into a naive datetime at midnight."""
    return datetime.strptime(date_str, "%Y-%m-%d")


def macos_to_datetime(macos_timestamp):
    """Convert a chat.db date (seconds or nanoseconds since 2001-01-01) to datetime."""
    if not macos_timestamp:
        return datetime.fromtimestamp(APPLE_EPOCH_OFFSET)
    seconds = macos_timestamp
    if abs(macos_timestamp) > _NANOSECOND_THRESHOLD:
        seconds = macos_timestamp / 1e9
    return datetime.fromtimestamp(seconds + APPLE_EPOCH_OFFSET)


def datetime_to_macos(dt):
    """Convert datetime to a chat.db nanosecond timestamp."""
    return int((dt.timestamp() - APPLE_EPOCH_OFFSET) * 1e9)
