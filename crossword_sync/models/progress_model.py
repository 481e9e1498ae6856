from sqlalchemy import Column, ForeignKey, String, DateTime, JSON, func
from sqlalchemy.orm import relationship
from crossword_sync.core.database import Base
from uuid import uuid4


class Progress(Base):
    """Authoritative grid snapshot, exactly one per session"""
    __tablename__ = "puzzle_progress"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    session_id = Column(String, ForeignKey("puzzle_sessions.id", ondelete="CASCADE"), nullable=False, unique=True)
    grid = Column(JSON, nullable=False) # row-major, "" for empty cells
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = Column(String, ForeignKey("users.id"))
    submitted_at = Column(DateTime(timezone=True)) # set once, never cleared

    session = relationship("Session", back_populates="progress")
