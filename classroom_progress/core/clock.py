from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from classroom_progress.core.config import LOCAL_TIMEZONE


def viewer_timezone() -> Optional[tzinfo]:
    # None means "whatever the server's local zone is"
    return ZoneInfo(LOCAL_TIMEZONE) if LOCAL_TIMEZONE else None


def local_now() -> datetime:
    """Current wall-clock time in the viewer's zone, naive, captured once per request."""
    return datetime.now(viewer_timezone()).replace(tzinfo=None)
