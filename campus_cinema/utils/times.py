from datetime import datetime
from typing import Optional


def to_naive_local(value: Optional[datetime]) -> Optional[datetime]:
    """
    Showtimes are stored as naive local datetimes. An aware value, e.g. an
    ISO string ending in ``Z`` from the frontend, is shifted to the server's
    local zone and stripped of its offset; naive values pass through.

      2026-10-20T09:00:00Z     -> 2026-10-20 11:00:00   (server on UTC+2)
      2026-10-20T11:00:00      -> 2026-10-20 11:00:00
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
