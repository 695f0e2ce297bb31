"""
Local time for a clicked coordinate.

We estimate the local time from longitude alone (15 degrees per hour, nautical time
zones). This ignores political time zones and daylight saving; an IANA zone lookup is
the job of the downstream time service. The estimate is still useful for the
day/night hint shown next to the resolved country.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def ensure_tz(dt: datetime, tz_name: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `tz_name` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(tz_name))
    return dt


def parse_datetime(value: str, tz_name: str = "UTC") -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Accepts a trailing `Z` (UTC). If the parsed value is naive, `tz_name` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_tz(datetime.fromisoformat(value), tz_name)


@dataclass(frozen=True)
class LocalTimeEstimate:
    label: str
    offset_hours: int
    local_time: datetime
    is_daytime: bool

    @property
    def time_string(self) -> str:
        return f"{self.local_time.strftime('%I:%M %p')} ({self.label}, Est.)"


def offset_label(offset_hours: int) -> str:
    if offset_hours == 0:
        return "UTC"
    return f"UTC{offset_hours:+d}"


def estimate_local_time(lon: float, now: datetime | None = None) -> LocalTimeEstimate:
    """Estimate local time at longitude `lon` (degrees east)."""
    if not math.isfinite(lon):
        raise ValueError(f"longitude must be finite, got {lon!r}")
    offset = int(math.floor(lon / 15.0 + 0.5))
    offset = max(-12, min(12, offset))
    label = offset_label(offset)

    current = ensure_tz(now, "UTC") if now is not None else datetime.now(timezone.utc)
    local = current.astimezone(timezone(timedelta(hours=offset), label))
    return LocalTimeEstimate(
        label=label,
        offset_hours=offset,
        local_time=local,
        is_daytime=6 <= local.hour < 18,
    )
