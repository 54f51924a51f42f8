"""Representative model definitions."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from scheduler.database import Base
from scheduler.models.user import User


class Representative(Base):
    """Provider profile attached to a user with the representative role."""
    __tablename__ = "representatives"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    department = Column(String, nullable=False, default='')
    title = Column(String, nullable=False, default='')
    specializations = Column(JSON, nullable=False, default=list)
    # Stored for the directory; the booking path only checks it when
    # ENFORCE_MAX_APPOINTMENTS_PER_DAY is on.
    max_appointments_per_day = Column(Integer, nullable=False, default=8)

    user = relationship(User, lazy="joined")
