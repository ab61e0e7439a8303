# app/core/datetime_utils.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current UTC time as a naive datetime.

    Timestamps are stored naive-in-UTC so that SQLite (which drops tzinfo)
    and other backends compare them the same way.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
