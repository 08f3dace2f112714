"""Event ORM model."""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(8), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_time = Column(DateTime, nullable=False)  # naive UTC
    end_time = Column(DateTime, nullable=False)
    user_id = Column(String(8), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    venue_id = Column(String(8), ForeignKey("venues.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="events")
    venue = relationship("Venue", back_populates="events")
    rsvps = relationship(
        "RSVP",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="RSVP.created_at",
    )

    @property
    def duration_hours(self) -> int:
        if not self.start_time or not self.end_time:
            return 0
        return int((self.end_time - self.start_time).total_seconds() // 3600)
