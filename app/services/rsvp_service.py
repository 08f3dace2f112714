"""RSVP service: invite codes and the answers recorded against them."""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import DatabaseError, NotFoundError, ValidationError
from app.models.event import Event
from app.models.rsvp import RSVP, RSVPStatus
from app.services.id_generator import BASE36, ID_LENGTH, insert_with_unique_id
from app.services.validation import parse_guest_count, parse_rsvp_response, validate_rsvp_name

logger = logging.getLogger(__name__)


def get_rsvp(db: Session, rsvp_id: str) -> RSVP:
    rsvp = db.query(RSVP).filter(RSVP.id == rsvp_id).first()
    if not rsvp:
        raise NotFoundError("RSVP not found")
    return rsvp


def list_rsvps(db: Session, event_id: str) -> list[RSVP]:
    return db.query(RSVP).filter(RSVP.event_id == event_id).order_by(RSVP.created_at, RSVP.name).all()


def create_rsvp(db: Session, event: Event, name: str) -> RSVP:
    """Issue a new pending invite for ``event``."""
    name = validate_rsvp_name(name)
    rsvp = RSVP(name=name, event_id=event.id, status=RSVPStatus.pending, extra_guests=0)
    try:
        insert_with_unique_id(db, rsvp, BASE36, ID_LENGTH)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create RSVP for event %s: %s", event.id, exc)
        raise DatabaseError("Failed to create the RSVP.") from exc
    db.refresh(rsvp)
    logger.info("Created RSVP %s (%s) for event %s", rsvp.id, name, event.id)
    return rsvp


def _save(db: Session, rsvp: RSVP, failure_message: str) -> RSVP:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s (%s): %s", failure_message, rsvp.id, exc)
        raise DatabaseError(failure_message) from exc
    db.refresh(rsvp)
    return rsvp


def update_rsvp(
    db: Session,
    rsvp: RSVP,
    name: str = "",
    response: str = "",
    extra_guests: str = "",
) -> RSVP:
    """Organizer edit. Every field is optional; nothing is written if any is invalid.

    ``response`` wins over ``extra_guests``; a bare guest count only applies
    to an RSVP that is already a yes.
    """
    new_name: Optional[str] = validate_rsvp_name(name) if name else None
    new_status, new_guests = None, None
    if response:
        new_status, new_guests = parse_rsvp_response(response)
    elif extra_guests:
        new_guests = parse_guest_count(extra_guests)
        if rsvp.status != RSVPStatus.yes and new_guests:
            raise ValidationError("Extra guests can only be set on a 'Yes' response.")

    if new_name is not None:
        rsvp.name = new_name
    if new_status is not None:
        rsvp.status = new_status
    if new_guests is not None:
        rsvp.extra_guests = new_guests
    _save(db, rsvp, "Failed to update RSVP")
    logger.info("Updated RSVP %s: status=%s guests=%d", rsvp.id, rsvp.status.value, rsvp.extra_guests)
    return rsvp


def record_response(db: Session, rsvp: RSVP, response: str) -> RSVP:
    """Invitee answer from the public response page."""
    if not response:
        raise ValidationError("Please select a response option (Yes/No).")
    status, guests = parse_rsvp_response(response)
    if status == RSVPStatus.pending:
        raise ValidationError("Please select a response option (Yes/No).")
    rsvp.status = status
    rsvp.extra_guests = guests
    _save(db, rsvp, "Failed to save your RSVP response. Please try again.")
    logger.info("RSVP %s answered %s with %d guests", rsvp.id, status.value, guests)
    return rsvp


def delete_rsvp(db: Session, rsvp: RSVP) -> None:
    rsvp_id = rsvp.id
    try:
        db.delete(rsvp)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete RSVP %s: %s", rsvp_id, exc)
        raise DatabaseError("Failed to delete the RSVP.") from exc
    logger.info("Deleted RSVP %s", rsvp_id)


def thank_you_message(rsvp: RSVP) -> str:
    if rsvp.status == RSVPStatus.yes:
        guests = rsvp.extra_guests or 0
        if guests == 0:
            return "Your response is confirmed. We look forward to seeing you!"
        if guests == 1:
            return "Your response is confirmed. We look forward to seeing you and your guest!"
        return f"Your response is confirmed. We look forward to seeing you and your {guests} guests!"
    return "Thank you for letting us know you can't make it."
