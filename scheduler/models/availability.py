"""Availability model definitions."""

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer, String
from scheduler.database import Base


class WeeklyAvailability(Base):
    """Recurring open hours of one representative on one weekday (0 = Sunday)."""
    __tablename__ = "availability"
    __table_args__ = (
        Index('uq_availability_representative_day', 'representative_id', 'day_of_week', unique=True),
    )

    id = Column(Integer, primary_key=True)
    representative_id = Column(Integer, ForeignKey("representatives.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    slot_duration = Column(Integer, nullable=False)
    # [{"start": "HH:MM", "end": "HH:MM"}, ...] in the order the representative gave them.
    break_times = Column(JSON, nullable=False, default=list)
