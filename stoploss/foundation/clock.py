"""Clock and calendar utilities.

Timestamps in stoploss are integer milliseconds since the epoch (UTC).
This module is the single source of "now" so tests can monkey-patch it
trivially, and the single place that turns timestamps into local calendar
days.

A ``tz`` of ``None`` means the machine's local timezone, resolved through
the platform's own rules so DST transitions land on the right midnight.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60_000

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(utc_now().timestamp() * MS_PER_SECOND)


# ── Timezones ────────────────────────────────────────────────────────────────

def resolve_tz(name: str | None) -> tzinfo | None:
    """Resolve a configured timezone name.

    Supported forms:
      - None / "" / "local" / "system" -> None (machine local time)
      - "UTC" / "Z" / "GMT" -> timezone.utc
      - fixed offsets: "+02:00", "+0200", "-05:00"
      - IANA names, e.g. "Europe/Berlin"

    Raises ValueError for identifiers that cannot be resolved.
    """
    s = (name or "").strip()
    low = s.lower()
    if low in {"", "local", "system"}:
        return None
    if low in {"utc", "z", "gmt"}:
        return timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh, mm = int(hh_s), int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {s!r}")
        sign = 1 if sign_s == "+" else -1
        return timezone(sign * timedelta(hours=hh, minutes=mm))

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Invalid timezone identifier: {s!r}") from exc


# ── Calendar helpers ─────────────────────────────────────────────────────────

def local_date(ms: int, tz: tzinfo | None = None) -> date:
    """Calendar date (in *tz*) that the instant *ms* falls on."""
    return datetime.fromtimestamp(ms / MS_PER_SECOND, tz=tz).date()


def midnight_ms(d: date, tz: tzinfo | None = None) -> int:
    """Epoch milliseconds of local midnight at the start of *d*."""
    if tz is None:
        # Naive datetimes are interpreted with the platform's local rules.
        moment = datetime(d.year, d.month, d.day)
    else:
        moment = datetime(d.year, d.month, d.day, tzinfo=tz)
    return int(moment.timestamp()) * MS_PER_SECOND


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def shift_months(d: date, months: int) -> date:
    """First day of the month *months* away from *d* (negative = past)."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def days_in_month(d: date) -> int:
    nxt = shift_months(d, 1)
    return (nxt - first_of_month(d)).days


def sunday_offset(d: date) -> int:
    """Column of *d* in a Sunday-first week (Sunday = 0)."""
    return (d.weekday() + 1) % 7
