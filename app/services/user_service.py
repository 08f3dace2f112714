"""User upsert keyed by email address."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import DatabaseError
from app.models.user import User
from app.services.id_generator import BASE62, ID_LENGTH, insert_with_unique_id

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def upsert_user(db: Session, email: str, name: str = "", picture: str = "") -> User:
    """Find the user by email, creating it if absent.

    Name and picture are rewritten only when they differ from what is stored.
    """
    user = get_user_by_email(db, email)
    try:
        if user is None:
            user = User(email=email, name=name or "", picture=picture or "")
            insert_with_unique_id(db, user, BASE62, ID_LENGTH)
            db.commit()
            db.refresh(user)
            logger.info("Created user %s (%s)", user.id, email)
            return user

        changed = False
        if name and user.name != name:
            user.name = name
            changed = True
        if picture and user.picture != picture:
            user.picture = picture
            changed = True
        if changed:
            db.commit()
            db.refresh(user)
            logger.info("Updated profile of user %s", user.id)
        return user
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to upsert user %s: %s", email, exc)
        raise DatabaseError("Failed to create user record.") from exc
