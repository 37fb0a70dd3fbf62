"""Size bucket and relative age labels."""

from datetime import datetime
from typing import Mapping, Optional

from autoarrange.models import SizeBucket

UNKNOWN_SIZE = "Unknown"


def size_category(size: int, buckets: Mapping[str, SizeBucket]) -> str:
    """
    Get the label of the first bucket containing size.

    Args:
        size: Size in bytes
        buckets: Ordered bucket table

    Returns:
        Bucket label, or "Unknown" if no bucket matches
    """
    for name, bucket in buckets.items():
        if bucket.contains(size):
            return name
    return UNKNOWN_SIZE


def age_in_days(created_time: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since created_time; never negative."""
    delta = (now or datetime.now()) - created_time
    return max(delta.days, 0)


def relative_age(created_time: datetime, now: Optional[datetime] = None) -> str:
    """
    Qualitative age label.

    0 days is "Today", 1 is "Yesterday", 2-7 count days, 8-30 count whole
    weeks and anything older counts 30-day months.
    """
    days = age_in_days(created_time, now)
    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days <= 7:
        return f"{days} days ago"
    if days <= 30:
        return f"{days // 7} weeks ago"
    return f"{days // 30} months ago"
