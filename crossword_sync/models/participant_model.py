from sqlalchemy import Column, ForeignKey, String, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from crossword_sync.core.database import Base
from uuid import uuid4


class Participant(Base):
    __tablename__ = "session_participants"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_session_user"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    session_id = Column(String, ForeignKey("puzzle_sessions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())
    last_activity = Column(DateTime(timezone=True))

    session = relationship("Session", back_populates="participants")
    user = relationship("User")
