"""Utility helper functions."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


def generate_uuid() -> str:
    """Generate a unique UUID."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, matching what MongoDB hands back."""
    return datetime.now(UTC).replace(tzinfo=None)


def day_bounds(tz_name: str, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Return the first and last millisecond of the calendar day containing ``now``.

    The day is taken in ``tz_name``; both bounds are returned as naive UTC so
    they can be compared against stored timestamps. A naive ``now`` is read as UTC.

    Args:
        tz_name: IANA timezone name, e.g. ``"Europe/Athens"``
        now: Reference instant, defaults to the current time

    Returns:
        ``(start, end)`` where ``start`` is 00:00:00.000 and ``end`` 23:59:59.999 local time
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    local_now = now.astimezone(ZoneInfo(tz_name))
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1) - timedelta(milliseconds=1)

    return (
        start.astimezone(UTC).replace(tzinfo=None),
        end.astimezone(UTC).replace(tzinfo=None),
    )


def to_cents(amount: float) -> int:
    """Convert a currency amount to integer minor units."""
    return int(round(amount * 100))
