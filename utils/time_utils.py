# utils/time_utils.py
from datetime import datetime, timezone, date


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utc_today(now: datetime | None = None) -> date:
    """Quota day: the calendar date in UTC."""
    dt = now or _utcnow()
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()


def _to_utc_aware(dt):
    if dt is None:
        return None
    return (
        dt.replace(tzinfo=timezone.utc)
        if (dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None)
        else dt.astimezone(timezone.utc)
    )


def from_timestamp(ts) -> datetime:
    if isinstance(ts, datetime):
        return _to_utc_aware(ts)
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)
