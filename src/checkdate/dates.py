"""Stamp date resolution."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .store import DocumentMeta

DATE_FORMAT = "%Y-%m-%d"


def today_str(now: Optional[datetime] = None) -> str:
    """Current local calendar day as YYYY-MM-DD."""
    return (now or datetime.now()).strftime(DATE_FORMAT)


def day_from_timestamp(ts: float) -> str:
    """Truncate an epoch timestamp to its local calendar day."""
    return datetime.fromtimestamp(ts).strftime(DATE_FORMAT)


def resolve_stamp_date(
    meta: Optional[DocumentMeta],
    *,
    use_file_creation_date: bool,
    now: Optional[datetime] = None,
) -> str:
    """Pick the date used for retroactive stamping.

    Args:
        meta: File timestamps of the document, or None for text with no file
        use_file_creation_date: True selects the creation time, False the
            last-modified time
        now: Clock override; only used when meta is None

    Returns:
        Date string in YYYY-MM-DD format
    """
    if meta is None:
        return today_str(now)
    if use_file_creation_date:
        return day_from_timestamp(meta.created)
    return day_from_timestamp(meta.modified)
