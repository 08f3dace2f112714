"""Venue service: owner-scoped CRUD; deleting a venue detaches its events."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import DatabaseError, NotFoundError
from app.models.event import Event
from app.models.venue import Venue
from app.services.id_generator import BASE62, ID_LENGTH, insert_with_unique_id
from app.services.validation import parse_capacity, validate_venue_name

logger = logging.getLogger(__name__)

VENUE_FIELDS = {
    "venue_name": "name",
    "venue_address": "address",
    "venue_description": "description",
    "venue_capacity": "capacity",
    "venue_phone": "phone",
    "venue_email": "email",
    "venue_website": "website",
}


def _venue_values(form: dict) -> dict:
    values = {column: (form.get(param) or "").strip() for param, column in VENUE_FIELDS.items()}
    values["name"] = validate_venue_name(values["name"])
    values["capacity"] = parse_capacity(values["capacity"])
    return values


def build_venue(user_id: str, form: dict) -> Venue:
    """Unsaved venue from ``venue_*`` form fields."""
    return Venue(user_id=user_id, **_venue_values(form))


def get_venue(db: Session, venue_id: str) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    return venue


def list_venues(db: Session, user_id: str) -> list[Venue]:
    return db.query(Venue).filter(Venue.user_id == user_id).order_by(Venue.name).all()


def create_venue(db: Session, user_id: str, form: dict) -> Venue:
    venue = build_venue(user_id, form)
    try:
        insert_with_unique_id(db, venue, BASE62, ID_LENGTH)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create venue '%s': %s", venue.name, exc)
        raise DatabaseError("Failed to create venue.") from exc
    db.refresh(venue)
    logger.info("Created venue '%s' (%s) by user %s", venue.name, venue.id, user_id)
    return venue


def update_venue(db: Session, venue: Venue, form: dict) -> Venue:
    for column, value in _venue_values(form).items():
        setattr(venue, column, value)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update venue %s: %s", venue.id, exc)
        raise DatabaseError("Failed to update venue.") from exc
    db.refresh(venue)
    logger.info("Updated venue %s", venue.id)
    return venue


def delete_venue(db: Session, venue: Venue) -> None:
    """Delete ``venue``; events that used it keep existing without a venue."""
    venue_id = venue.id
    try:
        detached = (
            db.query(Event)
            .filter(Event.venue_id == venue_id)
            .update({Event.venue_id: None}, synchronize_session="fetch")
        )
        db.delete(venue)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete venue %s: %s", venue_id, exc)
        raise DatabaseError("Failed to delete venue.") from exc
    logger.info("Deleted venue %s, detached %d events", venue_id, detached)
