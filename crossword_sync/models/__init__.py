from crossword_sync.models.user_model import User
from crossword_sync.models.puzzle_model import Puzzle
from crossword_sync.models.session_model import Session
from crossword_sync.models.participant_model import Participant
from crossword_sync.models.progress_model import Progress
