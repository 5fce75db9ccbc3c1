"""Slot catalog model definitions."""

from sqlalchemy import Column, Integer, String, Time
from backend.database import Base


class Slot(Base):
    """Represents a recurring weekly time window."""
    __tablename__ = "slots"

    id = Column(Integer, primary_key=True)
    day = Column(String, nullable=False)
    start = Column(Time, nullable=False)
    end = Column(Time, nullable=False)
