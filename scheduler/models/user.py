"""User model definitions."""

from sqlalchemy import Column, Integer, String
from scheduler.database import Base

USER_ROLE = 'user'
REPRESENTATIVE_ROLE = 'representative'


class User(Base):
    """Represents an account holder, either a requester or a representative."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False, default='')
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=False, default='')
    nationality = Column(String, nullable=False, default='')
    role = Column(String, nullable=False, default=USER_ROLE)  # user/representative
