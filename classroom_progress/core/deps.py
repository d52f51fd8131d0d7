from fastapi import Depends

from classroom_progress.clients.classroom import ClassroomClient
from classroom_progress.clients.google_oauth import GoogleOAuthClient
from classroom_progress.core.current_user import get_current_user
from classroom_progress.schemas.user import SessionUser


# every request that talks to Classroom gets its own client, and it will always close.
def get_classroom_client(current_user: SessionUser = Depends(get_current_user)):
    client = ClassroomClient(current_user.access_token)
    try:
        yield client
    finally:
        client.close()


def get_oauth_client() -> GoogleOAuthClient:
    return GoogleOAuthClient()
