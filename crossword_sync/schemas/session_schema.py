from typing import Optional, List, Literal
from datetime import datetime

from crossword_sync.schemas.base_schema import CamelModel
from crossword_sync.schemas.puzzle_schema import PuzzleRead
from crossword_sync.schemas.progress_schema import ProgressRead

Difficulty = Literal["standard", "easy", "learner"]


class SessionCreate(CamelModel):
    puzzle_id: str
    name: Optional[str] = None
    is_collaborative: bool = False
    difficulty: Difficulty = "standard"


class SessionRead(CamelModel):
    id: str
    puzzle_id: str
    owner_id: str
    name: Optional[str] = None
    is_collaborative: bool
    difficulty: Difficulty
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ParticipantRead(CamelModel):
    id: str
    session_id: str
    user_id: str
    joined_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None


# participant joined with the users table
class ParticipantActivity(CamelModel):
    id: str
    first_name: Optional[str] = None
    email: Optional[str] = None
    joined_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None


class SessionDetail(CamelModel):
    session: SessionRead
    puzzle: PuzzleRead
    progress: Optional[ProgressRead] = None
    participants: List[ParticipantRead]
