from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from classroom_progress.schemas.classroom import Announcement


class Reminder(BaseModel):
    id: str
    title: str
    due: Optional[datetime] = None
    remaining: str = ""
    alternate_link: Optional[str] = None


class Reminders(BaseModel):
    announcements: list[Announcement]
    upcoming: list[Reminder]
    missing: list[Reminder]
