from crossword_sync.schemas.puzzle_schema import PuzzleCreate, PuzzleData, PuzzleRead, Clue, GridSize
from crossword_sync.schemas.progress_schema import ProgressSave, ProgressRead
from crossword_sync.schemas.session_schema import (
    SessionCreate, SessionRead, SessionDetail, ParticipantRead, ParticipantActivity, Difficulty,
)
from crossword_sync.schemas.message_schema import JoinSession, CellUpdate
