"""Service catalog model definitions."""

from sqlalchemy import CheckConstraint, Column, Integer, String
from nexsched.database import Base


class Service(Base):
    """A bookable clinic service with a fixed duration."""
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_positive_duration"),
    )

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
