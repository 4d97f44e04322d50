from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, the form stored by the repositories."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(dt: datetime) -> datetime:
    """Normalize an incoming datetime to naive UTC. Naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
