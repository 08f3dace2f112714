"""Cookie-session authentication.

The signed session (Starlette ``SessionMiddleware``) carries the caller's
email, name and picture; the matching ``User`` row is upserted on demand.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthenticationError
from app.models.user import User
from app.services.user_service import get_user_by_email, upsert_user

logger = logging.getLogger(__name__)

SESSION_USER_EMAIL = "user_email"
SESSION_USER_NAME = "user_name"
SESSION_USER_PICTURE = "user_picture"


def session_email(request: Request) -> Optional[str]:
    return request.session.get(SESSION_USER_EMAIL) or None


def start_session(request: Request, user: User) -> None:
    request.session[SESSION_USER_EMAIL] = user.email
    request.session[SESSION_USER_NAME] = user.name
    request.session[SESSION_USER_PICTURE] = user.picture


def end_session(request: Request) -> None:
    request.session.clear()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the signed-in user, creating the row on first sight."""
    email = session_email(request)
    if not email:
        raise AuthenticationError("Authentication required.")
    user = get_user_by_email(db, email)
    if user is None:
        user = upsert_user(
            db,
            email,
            request.session.get(SESSION_USER_NAME, ""),
            request.session.get(SESSION_USER_PICTURE, ""),
        )
    return user
