from sqlalchemy import Column, ForeignKey, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from crossword_sync.core.database import Base
from uuid import uuid4


class Session(Base):
    """One instance of a user (or group) solving one puzzle"""
    __tablename__ = "puzzle_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    puzzle_id = Column(String, ForeignKey("puzzles.id"), nullable=False)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False)
    name = Column(String)
    is_collaborative = Column(Boolean, nullable=False, default=False)
    difficulty = Column(String, nullable=False, default="standard") # standard | easy | learner
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    puzzle = relationship("Puzzle", back_populates="sessions")
    owner = relationship("User", back_populates="owned_sessions")
    participants = relationship("Participant", back_populates="session", cascade="all, delete-orphan")
    progress = relationship("Progress", back_populates="session", uselist=False, cascade="all, delete-orphan")
