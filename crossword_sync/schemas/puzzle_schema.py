from pydantic import Field, model_validator
from typing import Optional, List, Literal
from datetime import datetime

from crossword_sync.schemas.base_schema import CamelModel


class GridSize(CamelModel):
    rows: int = Field(gt=0)
    cols: int = Field(gt=0)


class Clue(CamelModel):
    number: int
    direction: Literal["across", "down"]
    text: str = ""
    enumeration: str = ""
    answer: str = ""
    explanation: str = ""
    row: int = Field(ge=1) # 1-based
    col: int = Field(ge=1) # 1-based
    length: int = Field(gt=0)
    word_boundaries: List[int] = []


class ClueLists(CamelModel):
    across: List[Clue] = []
    down: List[Clue] = []


# Puzzle document as produced by the puzzle importer
class PuzzleData(CamelModel):
    puzzle_id: str
    title: str
    size: GridSize
    grid: List[str] # one string per row, "#" marks a black cell
    numbers: List[List[Optional[int]]] = []
    clues: ClueLists = ClueLists()

    @model_validator(mode="after")
    def check_grid_matches_size(self):
        if len(self.grid) != self.size.rows or any(len(row) != self.size.cols for row in self.grid):
            raise ValueError(f"grid does not match declared size {self.size.rows}x{self.size.cols}")
        for clue in self.clues.across + self.clues.down:
            last_row = clue.row + (clue.length - 1 if clue.direction == "down" else 0)
            last_col = clue.col + (clue.length - 1 if clue.direction == "across" else 0)
            if last_row > self.size.rows or last_col > self.size.cols:
                raise ValueError(f"clue {clue.number} {clue.direction} runs outside the grid")
        return self


class PuzzleCreate(CamelModel):
    data: PuzzleData
    uploaded_by: Optional[str] = None


class PuzzleRead(CamelModel):
    id: str
    puzzle_id: str
    title: str
    data: dict
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None
