# import moduls/libraries
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List


# import form project
from crossword_sync.core.database import get_db
from crossword_sync.core.dependencies import get_current_user
from crossword_sync.schemas import PuzzleRead
from crossword_sync.services import PuzzleServices


router = APIRouter(dependencies=[Depends(get_current_user)])


# get a list of puzzles
@router.get("", response_model=List[PuzzleRead])
def get_puzzles(db: Session = Depends(get_db)):
    """List every stored puzzle"""
    services = PuzzleServices(db)
    return services.get_all_puzzle()


# Get puzzle by id
@router.get("/{puzzle_id}", response_model=PuzzleRead)
def get_puzzle(puzzle_id: str, db: Session = Depends(get_db)):
    """Fetch one puzzle by ID"""
    services = PuzzleServices(db)
    return services.get_puzzle_by_id(puzzle_id)
