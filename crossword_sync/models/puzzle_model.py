from sqlalchemy import Column, ForeignKey, String, DateTime, JSON, func
from sqlalchemy.orm import relationship
from crossword_sync.core.database import Base
from uuid import uuid4


class Puzzle(Base):
    __tablename__ = "puzzles"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    puzzle_id = Column(String, nullable=False, unique=True)
    title = Column(String, nullable=False)
    data = Column(JSON, nullable=False) # size, grid, numbers and clues
    uploaded_by = Column(String, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # relationship
    sessions = relationship("Session", back_populates="puzzle")

    @property
    def rows(self) -> int:
        return int(self.data["size"]["rows"])

    @property
    def cols(self) -> int:
        return int(self.data["size"]["cols"])
