from datetime import datetime

from pydantic import BaseModel, EmailStr


class SessionUser(BaseModel):
    """Identity decoded from the session token; carries the Google credential."""

    email: EmailStr
    name: str | None = None
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None


class Viewer(BaseModel):
    email: EmailStr
    name: str | None = None
    expires_at: datetime | None = None

    class Config:
        from_attributes = True
