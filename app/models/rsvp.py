"""RSVP ORM model: an invite code plus the invitee's answer."""
import enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

MAX_GUEST_COUNT = 4


class RSVPStatus(str, enum.Enum):
    pending = "pending"
    yes = "yes"
    no = "no"


class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (
        CheckConstraint(
            f"extra_guests >= 0 AND extra_guests <= {MAX_GUEST_COUNT}",
            name="ck_rsvps_extra_guests_range",
        ),
    )

    id = Column(String(8), primary_key=True)
    name = Column(String(100), nullable=False)
    status = Column(SAEnum(RSVPStatus), nullable=False, default=RSVPStatus.pending)
    extra_guests = Column(Integer, nullable=False, default=0)
    event_id = Column(String(8), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="rsvps")

    @property
    def is_answered(self) -> bool:
        return self.status not in (None, RSVPStatus.pending)

    @property
    def status_label(self) -> str:
        """Human label shown in lists: Pending, Yes or No."""
        return (self.status or RSVPStatus.pending).value.capitalize()

    @property
    def response_value(self) -> str:
        """Form value matching the current answer, e.g. ``Yes,2`` or ``No``."""
        if self.status == RSVPStatus.yes:
            return f"Yes,{self.extra_guests or 0}"
        if self.status == RSVPStatus.no:
            return "No"
        return ""
