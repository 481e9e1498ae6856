from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from crossword_sync.schemas import PuzzleData

ACROSS = "across"
DOWN = "down"
BLACK = "#"

Cell = Tuple[int, int]


def other_direction(direction: str) -> str:
    return DOWN if direction == ACROSS else ACROSS


@dataclass(frozen=True)
class ClueSpan:
    """A clue placed on the grid, 0-based"""
    number: int
    direction: str
    row: int
    col: int
    length: int
    answer: str = ""
    text: str = ""
    enumeration: str = ""
    explanation: str = ""

    def cells(self) -> List[Cell]:
        if self.direction == ACROSS:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]

    def covers(self, row: int, col: int) -> bool:
        if self.direction == ACROSS:
            return row == self.row and self.col <= col < self.col + self.length
        return col == self.col and self.row <= row < self.row + self.length

    def letter_at(self, row: int, col: int) -> Optional[str]:
        """Expected letter for a covered cell, None when the answer is unknown"""
        offset = col - self.col if self.direction == ACROSS else row - self.row
        if 0 <= offset < len(self.answer):
            return self.answer[offset].upper()
        return None


class PuzzleLayout:
    """
    Read-only geometry of a puzzle: which cells are playable and which clue
    covers a cell in each direction.
    """

    def __init__(self, rows: int, cols: int, grid: List[str], clues: Dict[str, List[ClueSpan]]):
        self.rows = rows
        self.cols = cols
        self.grid = grid
        self._clues = {ACROSS: list(clues.get(ACROSS, [])), DOWN: list(clues.get(DOWN, []))}

    @classmethod
    def from_document(cls, document) -> "PuzzleLayout":
        """Build from a puzzle document (a stored JSON dict or a PuzzleData)"""
        if not isinstance(document, PuzzleData):
            document = PuzzleData.model_validate(document)

        def spans(clues):
            return [
                ClueSpan(
                    number=clue.number,
                    direction=clue.direction,
                    row=clue.row - 1,
                    col=clue.col - 1,
                    length=clue.length,
                    answer=clue.answer,
                    text=clue.text,
                    enumeration=clue.enumeration,
                    explanation=clue.explanation,
                )
                for clue in clues
            ]

        return cls(
            rows=document.size.rows,
            cols=document.size.cols,
            grid=list(document.grid),
            clues={ACROSS: spans(document.clues.across), DOWN: spans(document.clues.down)},
        )

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_white(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self.grid[row][col] != BLACK

    def first_white_cell(self) -> Optional[Cell]:
        for row in range(self.rows):
            for col in range(self.cols):
                if self.is_white(row, col):
                    return row, col
        return None

    def clues(self, direction: str) -> List[ClueSpan]:
        return list(self._clues[direction])

    def clue_at(self, row: int, col: int, direction: str) -> Optional[ClueSpan]:
        for clue in self._clues[direction]:
            if clue.covers(row, col):
                return clue
        return None

    def find_clue(self, number: int, direction: str) -> Optional[ClueSpan]:
        for clue in self._clues[direction]:
            if clue.number == number:
                return clue
        return None
