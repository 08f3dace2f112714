"""Venue ORM model."""
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Venue(Base):
    __tablename__ = "venues"

    id = Column(String(8), primary_key=True)
    user_id = Column(String(8), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    capacity = Column(Integer, nullable=False, default=0)
    phone = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    website = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="venues")
    events = relationship("Event", back_populates="venue")
