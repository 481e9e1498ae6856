from crossword_sync.services.puzzle_services import PuzzleServices
from crossword_sync.services.session_services import SessionService
