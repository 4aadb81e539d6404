"""Local wall-clock time helpers.

Every timestamp the journal stores or buckets by day is a naive datetime in
the local zone.
"""

from datetime import datetime


def to_local(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
