"""Account model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


class Account(Base):
    """Represents an application user."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False)  # patient/admin
