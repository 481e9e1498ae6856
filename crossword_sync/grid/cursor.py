"""
Local grid and cursor state for one solver.

Every transition is a pure function `(layout, state, ...) -> state`; nothing is
mutated in place. Local keystrokes and clicks move the cursor, remote
`cell_update` / `progress_update` frames only ever touch the letters, so a
collaborator's edit never steals local focus.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from crossword_sync.grid.layout import ACROSS, DOWN, Cell, ClueSpan, PuzzleLayout, other_direction

Grid = Tuple[Tuple[str, ...], ...]

ARROWS = {
    "ArrowUp": (-1, 0),
    "ArrowDown": (1, 0),
    "ArrowLeft": (0, -1),
    "ArrowRight": (0, 1),
}
ERASE_KEYS = {"Backspace", "Delete"}
TOGGLE_KEYS = {" ", "Space", "Tab"}


class RevealNotAllowed(Exception):
    """Reveal requested in a difficulty that does not permit it"""


@dataclass(frozen=True)
class CursorState:
    grid: Grid
    active_cell: Optional[Cell] = None
    direction: str = ACROSS

    def value_at(self, row: int, col: int) -> str:
        return self.grid[row][col]

    def to_rows(self) -> List[List[str]]:
        """Grid in the persisted/wire shape"""
        return [list(row) for row in self.grid]


# events fed to reduce()
@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class CellClick:
    row: int
    col: int


@dataclass(frozen=True)
class ClueClick:
    number: int
    direction: str


@dataclass(frozen=True)
class RemoteMessage:
    message: Dict[str, Any]


Event = Union[KeyPress, CellClick, ClueClick, RemoteMessage]


def _freeze(rows) -> Grid:
    return tuple(tuple(row) for row in rows)


def _with_cell(grid: Grid, row: int, col: int, value: str) -> Grid:
    rows = [list(r) for r in grid]
    rows[row][col] = value
    return _freeze(rows)


def initial_state(layout: PuzzleLayout, grid=None) -> CursorState:
    """Empty (or restored) grid, cursor on the first white cell, typing across"""
    if grid is None:
        grid = [["" for _ in range(layout.cols)] for _ in range(layout.rows)]
    return CursorState(grid=_freeze(grid), active_cell=layout.first_white_cell(), direction=ACROSS)


def _step(layout: PuzzleLayout, cell: Cell, direction: str, step: int) -> Optional[Cell]:
    """One cell in reading order for the direction; rows (or columns) run on into the next one"""
    row, col = cell
    if direction == ACROSS:
        col += step
        if col >= layout.cols:
            row, col = row + 1, 0
        elif col < 0:
            row, col = row - 1, layout.cols - 1
    else:
        row += step
        if row >= layout.rows:
            row, col = 0, col + 1
        elif row < 0:
            row, col = layout.rows - 1, col - 1
    if not layout.in_bounds(row, col):
        return None
    return row, col


def _advance(layout: PuzzleLayout, cell: Cell, direction: str) -> Optional[Cell]:
    """Next white cell after `cell`, skipping black ones; bounded so it always terminates"""
    for _ in range(max(layout.rows, layout.cols)):
        cell = _step(layout, cell, direction, 1)
        if cell is None:
            return None
        if layout.is_white(*cell):
            return cell
    return None


def type_character(layout: PuzzleLayout, state: CursorState, char: str) -> CursorState:
    if state.active_cell is None:
        return state
    row, col = state.active_cell
    grid = _with_cell(state.grid, row, col, char.upper())
    target = _advance(layout, state.active_cell, state.direction)
    return replace(state, grid=grid, active_cell=target or state.active_cell)


def erase(layout: PuzzleLayout, state: CursorState) -> CursorState:
    """
    Clear the active cell and step back one cell. When the active cell was
    already empty the cell stepped back onto is cleared instead, which undoes
    the letter just typed.
    """
    if state.active_cell is None:
        return state
    row, col = state.active_cell
    back = _step(layout, state.active_cell, state.direction, -1)
    if back is not None and not layout.is_white(*back):
        back = None

    if state.grid[row][col]:
        return replace(state, grid=_with_cell(state.grid, row, col, ""), active_cell=back or state.active_cell)
    if back is None:
        return state
    return replace(state, grid=_with_cell(state.grid, back[0], back[1], ""), active_cell=back)


def toggle_direction(state: CursorState) -> CursorState:
    return replace(state, direction=other_direction(state.direction))


def move_arrow(layout: PuzzleLayout, state: CursorState, d_row: int, d_col: int) -> CursorState:
    """Jump to the nearest white cell in the arrow's direction; stay put if there is none"""
    if state.active_cell is None:
        return state
    row, col = state.active_cell
    row, col = row + d_row, col + d_col
    while layout.in_bounds(row, col):
        if layout.is_white(row, col):
            return replace(state, active_cell=(row, col))
        row, col = row + d_row, col + d_col
    return state


def click_cell(layout: PuzzleLayout, state: CursorState, row: int, col: int) -> CursorState:
    if not layout.is_white(row, col):
        return state
    if state.active_cell == (row, col):
        return toggle_direction(state)

    direction = state.direction
    if layout.clue_at(row, col, direction) is None and layout.clue_at(row, col, other_direction(direction)):
        direction = other_direction(direction)
    return replace(state, active_cell=(row, col), direction=direction)


def click_clue(layout: PuzzleLayout, state: CursorState, number: int, direction: str) -> CursorState:
    clue = layout.find_clue(number, direction)
    if clue is None:
        return state
    return replace(state, active_cell=(clue.row, clue.col), direction=direction)


def press_key(layout: PuzzleLayout, state: CursorState, key: str) -> CursorState:
    if key in ERASE_KEYS:
        return erase(layout, state)
    if key in TOGGLE_KEYS:
        return toggle_direction(state)
    if key in ARROWS:
        return move_arrow(layout, state, *ARROWS[key])
    if len(key) == 1 and key.isascii() and key.isalpha():
        return type_character(layout, state, key)
    return state


def _remote_value(value) -> Optional[str]:
    """A relayed cell value as stored in the grid, None when it cannot be a cell"""
    if value is None:
        return ""
    if not isinstance(value, str) or len(value) > 1 or (value and not value.isalpha()):
        return None
    return value.upper()


def apply_remote(layout: PuzzleLayout, state: CursorState, message: Dict[str, Any]) -> CursorState:
    """Fold a relayed frame into the grid; cursor and direction are left alone"""
    message_type = message.get("type")
    if message_type == "cell_update":
        row, col = message.get("row"), message.get("col")
        if not isinstance(row, int) or not isinstance(col, int) or not layout.in_bounds(row, col):
            return state
        value = _remote_value(message.get("value"))
        if value is None:
            return state
        return replace(state, grid=_with_cell(state.grid, row, col, value))
    if message_type == "progress_update":
        grid = message.get("grid")
        if not isinstance(grid, list) or len(grid) != layout.rows:
            return state
        if any(not isinstance(row, list) or len(row) != layout.cols for row in grid):
            return state
        rows = [[_remote_value(value) for value in row] for row in grid]
        if any(value is None for row in rows for value in row):
            return state
        return replace(state, grid=_freeze(rows))
    return state


def reduce(layout: PuzzleLayout, state: CursorState, event: Event) -> CursorState:
    if isinstance(event, KeyPress):
        return press_key(layout, state, event.key)
    if isinstance(event, CellClick):
        return click_cell(layout, state, event.row, event.col)
    if isinstance(event, ClueClick):
        return click_clue(layout, state, event.number, event.direction)
    if isinstance(event, RemoteMessage):
        return apply_remote(layout, state, event.message)
    raise TypeError(f"unknown event: {event!r}")


def active_clue(layout: PuzzleLayout, state: CursorState) -> Optional[ClueSpan]:
    if state.active_cell is None:
        return None
    return layout.clue_at(*state.active_cell, state.direction)


def clue_cells(layout: PuzzleLayout, state: CursorState) -> List[Cell]:
    """Cells of the active clue, used for highlighting"""
    clue = active_clue(layout, state)
    return clue.cells() if clue else []


def is_clue_filled(state: CursorState, clue: ClueSpan) -> bool:
    for row, col in clue.cells():
        if row >= len(state.grid) or col >= len(state.grid[row]) or not state.grid[row][col]:
            return False
    return True


def incorrect_cells(layout: PuzzleLayout, state: CursorState) -> Set[Cell]:
    """Filled cells that disagree with the across or down answer covering them"""
    wrong = set()
    for row, values in enumerate(state.grid):
        for col, value in enumerate(values):
            if not value:
                continue
            for direction in (ACROSS, DOWN):
                clue = layout.clue_at(row, col, direction)
                expected = clue.letter_at(row, col) if clue else None
                if expected is not None and expected != value.upper():
                    wrong.add((row, col))
    return wrong


def _fill(grid: Grid, clue: ClueSpan) -> Grid:
    rows = [list(r) for r in grid]
    for row, col in clue.cells():
        letter = clue.letter_at(row, col)
        if letter:
            rows[row][col] = letter
    return _freeze(rows)


def reveal_clue(layout: PuzzleLayout, state: CursorState, difficulty: str) -> CursorState:
    if difficulty == "standard":
        raise RevealNotAllowed("reveal is disabled in standard difficulty")
    clue = active_clue(layout, state)
    if clue is None:
        return state
    return replace(state, grid=_fill(state.grid, clue))


def reveal_puzzle(layout: PuzzleLayout, state: CursorState, difficulty: str) -> CursorState:
    if difficulty == "standard":
        raise RevealNotAllowed("reveal is disabled in standard difficulty")
    grid = state.grid
    for clue in layout.clues(ACROSS) + layout.clues(DOWN):
        grid = _fill(grid, clue)
    return replace(state, grid=grid)


def cell_update_message(state: CursorState, row: int, col: int) -> Dict[str, Any]:
    return {"type": "cell_update", "row": row, "col": col, "value": state.grid[row][col]}


def local_updates(before: CursorState, after: CursorState) -> List[Dict[str, Any]]:
    """Outbound cell_update frames for every cell a local transition changed"""
    return [
        cell_update_message(after, row, col)
        for row, (old, new) in enumerate(zip(before.grid, after.grid))
        for col, (a, b) in enumerate(zip(old, new))
        if a != b
    ]
