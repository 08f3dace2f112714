"""Pydantic view models for Events."""
from datetime import datetime
from pydantic import BaseModel


class EventStatistics(BaseModel):
    """One row of the event list."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    venue_name: str = "N/A"
    rsvp_count: int = 0
    rsvp_answered_count: int = 0

    model_config = {"from_attributes": True}
