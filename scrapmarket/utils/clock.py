"""Wall clock used for timestamps and expiration comparisons."""

from datetime import datetime, timezone


def utcnow():
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
