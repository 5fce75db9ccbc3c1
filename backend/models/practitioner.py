"""Practitioner model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from backend.database import Base


practitioner_slots = Table(
    "practitioner_slots",
    Base.metadata,
    Column("practitioner_id", Integer, ForeignKey("practitioners.id"), primary_key=True),
    Column("slot_id", Integer, ForeignKey("slots.id"), primary_key=True),
)


class Practitioner(Base):
    """Represents a care provider whose availability is a set of catalog slots."""
    __tablename__ = "practitioners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    specialty = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    biography = Column(Text, nullable=False)
    facility = Column(String, nullable=False)
