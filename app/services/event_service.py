"""Event service: creation, edits, venue association, deletion.

Each public function commits once at the end so an operation is either fully
applied or rolled back.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.errors import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from app.models.event import Event
from app.models.venue import Venue
from app.schemas.event import EventStatistics
from app.services import venue_service
from app.services.id_generator import BASE62, ID_LENGTH, insert_with_unique_id
from app.services.validation import event_window, validate_title

logger = logging.getLogger(__name__)

ACTION_UPDATE_EVENT_DETAILS = "update_event_details"
ACTION_SHOW_ADD_VENUE = "show_add_venue"
ACTION_ADD_EXISTING_VENUE = "add_existing_venue"
ACTION_CREATE_NEW_VENUE = "create_new_venue"
ACTION_REMOVE_VENUE = "remove_venue"

EVENT_ACTIONS = (
    ACTION_UPDATE_EVENT_DETAILS,
    ACTION_SHOW_ADD_VENUE,
    ACTION_ADD_EXISTING_VENUE,
    ACTION_CREATE_NEW_VENUE,
    ACTION_REMOVE_VENUE,
)


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s: %s", failure_message, exc)
        raise DatabaseError(failure_message) from exc


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def list_events(db: Session, user_id: str) -> list[Event]:
    return (
        db.query(Event)
        .options(selectinload(Event.rsvps), selectinload(Event.venue))
        .filter(Event.user_id == user_id)
        .order_by(Event.start_time)
        .all()
    )


def event_statistics(events: list[Event]) -> list[EventStatistics]:
    """RSVP totals and venue name for each event in the list view."""
    stats = []
    for event in events:
        stats.append(EventStatistics(
            id=event.id,
            title=event.title,
            start_time=event.start_time,
            end_time=event.end_time,
            venue_name=event.venue.name if event.venue else "N/A",
            rsvp_count=len(event.rsvps),
            rsvp_answered_count=sum(1 for rsvp in event.rsvps if rsvp.is_answered),
        ))
    return stats


def create_event(
    db: Session,
    user_id: str,
    title: str,
    description: str,
    start_time: str,
    duration: str,
    tz_name: str = "UTC",
) -> Event:
    """Validate form values and insert a new event owned by ``user_id``."""
    title = validate_title(title)
    start, end = event_window(start_time, duration, tz_name)
    event = Event(
        title=title,
        description=description or "",
        start_time=start,
        end_time=end,
        user_id=user_id,
    )
    try:
        insert_with_unique_id(db, event, BASE62, ID_LENGTH)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to insert event '%s': %s", title, exc)
        raise DatabaseError("Failed to create the event.") from exc
    _commit(db, "Failed to create the event.")
    db.refresh(event)
    logger.info("Created event '%s' (%s) by user %s", title, event.id, user_id)
    return event


def apply_event_action(
    db: Session,
    event: Event,
    user_id: str,
    action: str,
    form: dict,
    tz_name: str = "UTC",
) -> Optional[Event]:
    """Run one edit action against ``event`` in a single transaction.

    Returns the updated event, or None when the action only asks for the venue
    subform and nothing was written.
    """
    action = action or ACTION_UPDATE_EVENT_DETAILS
    if action not in EVENT_ACTIONS:
        raise ValidationError("Unknown action")

    if action == ACTION_SHOW_ADD_VENUE:
        return None

    if action == ACTION_UPDATE_EVENT_DETAILS:
        title = validate_title(form.get("title", ""))
        start, end = event_window(form.get("start_time", ""), form.get("duration", ""), tz_name)
        event.title = title
        event.description = form.get("description", "")
        event.start_time = start
        event.end_time = end

    elif action == ACTION_ADD_EXISTING_VENUE:
        venue_id = form.get("venue_id", "")
        if not venue_id:
            return None
        venue = db.query(Venue).filter(Venue.id == venue_id).first()
        if not venue:
            raise NotFoundError("Venue not found")
        if venue.user_id != user_id:
            raise ForbiddenError("You do not have permission to use this venue.")
        event.venue_id = venue.id

    elif action == ACTION_CREATE_NEW_VENUE:
        venue = venue_service.build_venue(user_id, form)
        try:
            insert_with_unique_id(db, venue, BASE62, ID_LENGTH)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to insert venue for event %s: %s", event.id, exc)
            raise DatabaseError("Failed to create the venue.") from exc
        event.venue_id = venue.id

    elif action == ACTION_REMOVE_VENUE:
        event.venue_id = None

    _commit(db, "Failed to update the event.")
    db.refresh(event)
    logger.info("Applied %s to event %s", action, event.id)
    return event


def delete_event(db: Session, event: Event) -> None:
    """Delete the event and every RSVP under it."""
    event_id = event.id
    try:
        deleted_rsvps = 0
        for rsvp in list(event.rsvps):
            db.delete(rsvp)
            deleted_rsvps += 1
        db.delete(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete event %s: %s", event_id, exc)
        raise DatabaseError("Failed to delete the event.") from exc
    logger.info("Deleted event %s and %d RSVPs", event_id, deleted_rsvps)
