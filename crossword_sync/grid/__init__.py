from crossword_sync.grid.layout import ACROSS, DOWN, ClueSpan, PuzzleLayout
from crossword_sync.grid.cursor import (
    CursorState, KeyPress, CellClick, ClueClick, RemoteMessage, RevealNotAllowed,
    initial_state, reduce, apply_remote, active_clue, clue_cells, is_clue_filled, incorrect_cells,
    reveal_clue, reveal_puzzle, cell_update_message, local_updates,
)
