import logging
from typing import List

from fastapi import HTTPException

from crossword_sync import models
from crossword_sync.schemas import PuzzleCreate

logger = logging.getLogger(__name__)


def empty_grid(rows: int, cols: int) -> List[List[str]]:
    return [["" for _ in range(cols)] for _ in range(rows)]


class PuzzleServices:
    """ Handles all puzzle related DB operation"""

    def __init__(self, db):
        self.db = db

    def create_puzzle(self, puzzle_data: PuzzleCreate) -> models.Puzzle:
        """Store a puzzle document; a document already stored under the same puzzle id is returned as is"""
        document = puzzle_data.data
        existing = (self.db.query(models.Puzzle)
                    .filter(models.Puzzle.puzzle_id == document.puzzle_id)
                    .first())
        if existing:
            logger.info("Puzzle %s already stored as %s", document.puzzle_id, existing.id)
            return existing

        puzzle = models.Puzzle(
            puzzle_id=document.puzzle_id,
            title=document.title,
            data=document.model_dump(by_alias=True),
            uploaded_by=puzzle_data.uploaded_by,
        )
        self.db.add(puzzle)
        self.db.commit()
        self.db.refresh(puzzle)
        logger.info("Stored puzzle %s (%sx%s)", puzzle.title, puzzle.rows, puzzle.cols)
        return puzzle

    def get_all_puzzle(self) -> List[models.Puzzle]:
        return self.db.query(models.Puzzle).order_by(models.Puzzle.created_at.desc()).all()

    def get_puzzle_by_id(self, puzzle_id: str) -> models.Puzzle:
        """Fetch puzzle by id"""
        puzzle = self.db.query(models.Puzzle).filter(models.Puzzle.id == puzzle_id).first()
        if not puzzle:
            raise HTTPException(status_code=404, detail="Puzzle not found")
        return puzzle
