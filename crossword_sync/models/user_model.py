from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from crossword_sync.core.database import Base
from uuid import uuid4


class User(Base):
    """Identity record owned by the external auth layer"""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String)
    role = Column(String, nullable=False, default="user") # admin | user
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owned_sessions = relationship("Session", back_populates="owner")
