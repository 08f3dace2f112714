"""Row-level ownership checks.

The guard only reports; callers decide how to render a failure, usually via
``OwnershipResult.raise_for_status``.
"""
import enum
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.errors import ForbiddenError, NotFoundError
from app.models.event import Event
from app.models.rsvp import RSVP
from app.models.venue import Venue

OwnerLookup = Callable[[str], Optional[str]]


class OwnershipStatus(str, enum.Enum):
    authorized = "authorized"
    not_found = "not_found"
    forbidden = "forbidden"


@dataclass(frozen=True)
class OwnershipResult:
    status: OwnershipStatus
    resource_id: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OwnershipStatus.authorized

    def raise_for_status(self, resource_name: str) -> None:
        if self.status == OwnershipStatus.not_found:
            raise NotFoundError(f"{resource_name} not found")
        if self.status == OwnershipStatus.forbidden:
            raise ForbiddenError(f"You do not have permission to modify this {resource_name}.")


def verify_ownership(resource_id: str, owner_lookup: OwnerLookup, current_user_id: str) -> OwnershipResult:
    """Compare the owner of ``resource_id`` with the caller.

    An empty ``resource_id`` is authorized: creation flows have nothing to own
    yet, so a missing id is left to parameter validation downstream.
    """
    if not resource_id:
        return OwnershipResult(OwnershipStatus.authorized)
    owner_id = owner_lookup(resource_id)
    if owner_id is None:
        return OwnershipResult(OwnershipStatus.not_found, resource_id)
    if owner_id != current_user_id:
        return OwnershipResult(OwnershipStatus.forbidden, resource_id)
    return OwnershipResult(OwnershipStatus.authorized, resource_id)


def event_owner(db: Session) -> OwnerLookup:
    def _lookup(event_id: str) -> Optional[str]:
        return db.query(Event.user_id).filter(Event.id == event_id).scalar()
    return _lookup


def venue_owner(db: Session) -> OwnerLookup:
    def _lookup(venue_id: str) -> Optional[str]:
        return db.query(Venue.user_id).filter(Venue.id == venue_id).scalar()
    return _lookup


def rsvp_owner(db: Session) -> OwnerLookup:
    """RSVPs are owned through their parent event."""
    def _lookup(rsvp_id: str) -> Optional[str]:
        return (
            db.query(Event.user_id)
            .join(RSVP, RSVP.event_id == Event.id)
            .filter(RSVP.id == rsvp_id)
            .scalar()
        )
    return _lookup
