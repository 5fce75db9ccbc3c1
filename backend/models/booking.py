"""Booking model definitions."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Time
from backend.database import Base


class Booking(Base):
    """Represents an appointment booked by an account with a practitioner."""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    practitioner_id = Column(Integer, ForeignKey("practitioners.id"), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    method = Column(String, nullable=False)
    status = Column(String, nullable=False)
    note = Column(String)
