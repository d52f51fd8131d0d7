import os
from datetime import timedelta

# Session tokens. Override SECRET_KEY outside local development.
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
# Session tokens carry Google credentials, so they are also encrypted (JWE, direct key)
SESSION_ENCRYPTION = "A256GCM"
SESSION_TOKEN_EXPIRE = timedelta(hours=int(os.getenv("SESSION_TOKEN_EXPIRE_HOURS", "8")))
OAUTH_STATE_EXPIRE = timedelta(minutes=10)

# Google OAuth client
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
OAUTH_REDIRECT_URI = os.getenv("OAUTH_REDIRECT_URI", "http://localhost:8000/auth/callback")
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = [
    "openid",
    "email",
    "profile",
    "https://www.googleapis.com/auth/classroom.courses.readonly",
    "https://www.googleapis.com/auth/classroom.coursework.me.readonly",
    "https://www.googleapis.com/auth/classroom.rosters.readonly",
    "https://www.googleapis.com/auth/classroom.announcements.readonly",
]

# Classroom API
CLASSROOM_API_BASE = os.getenv("CLASSROOM_API_BASE", "https://classroom.googleapis.com/v1")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
FETCH_CONCURRENCY = int(os.getenv("FETCH_CONCURRENCY", "8"))
COURSES_PAGE_SIZE = 20
ANNOUNCEMENTS_PAGE_SIZE = 10

# Reminders panel
REMINDER_HORIZON = timedelta(days=7)
RECENT_ANNOUNCEMENTS_LIMIT = 5

# IANA zone used as the viewer's wall clock (unset -> server local time)
LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE") or None

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
