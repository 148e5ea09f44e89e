"""Dentist model definitions."""

from sqlalchemy import Column, String
from nexsched.database import Base


class Dentist(Base):
    """Represents a practitioner patients can book with."""
    __tablename__ = "dentists"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    specialty = Column(String)
    color = Column(String)  # hex colour for calendar events
