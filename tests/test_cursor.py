import pytest

from crossword_sync.grid import (
    ACROSS, DOWN, PuzzleLayout, CellClick, ClueClick, KeyPress, RemoteMessage, RevealNotAllowed,
    initial_state, reduce, active_clue, clue_cells, is_clue_filled, incorrect_cells, reveal_clue, reveal_puzzle,
    local_updates,
)
from tests.conftest import RING_DOCUMENT, TINY_DOCUMENT


@pytest.fixture
def tiny():
    return PuzzleLayout.from_document(TINY_DOCUMENT)


@pytest.fixture
def ring():
    return PuzzleLayout.from_document(RING_DOCUMENT)


def press(layout, state, *keys):
    for key in keys:
        state = reduce(layout, state, KeyPress(key))
    return state


def test_initial_state(ring):
    state = initial_state(ring)
    assert state.active_cell == (0, 0)
    assert state.direction == ACROSS
    assert state.to_rows() == [["", "", ""], ["", "", ""], ["", "", ""]]


def test_typing_fills_row_major(tiny):
    state = press(tiny, initial_state(tiny), "A", "B", "C", "D")
    assert state.to_rows() == [["A", "B"], ["C", "D"]]
    assert state.active_cell == (1, 1)


def test_typing_uppercases(tiny):
    state = press(tiny, initial_state(tiny), "x")
    assert state.value_at(0, 0) == "X"


def test_typing_skips_black_cells_down(ring):
    state = reduce(ring, initial_state(ring), CellClick(0, 1))
    state = press(ring, state, " ")
    assert state.direction == DOWN
    state = press(ring, state, "A")
    # (1, 1) is black, the probe lands on (2, 1)
    assert state.active_cell == (2, 1)


def test_typing_at_last_cell_stays(tiny):
    state = reduce(tiny, initial_state(tiny), CellClick(1, 1))
    state = press(tiny, state, "Z")
    assert state.active_cell == (1, 1)
    assert state.value_at(1, 1) == "Z"


def test_backspace_after_typing_returns_and_clears(tiny):
    typed = press(tiny, initial_state(tiny), "A")
    assert typed.active_cell == (0, 1)

    erased = press(tiny, typed, "Backspace")
    assert erased.active_cell == (0, 0)
    assert erased.value_at(0, 0) == ""


def test_delete_on_filled_cell_clears_then_steps_back(tiny):
    state = press(tiny, initial_state(tiny), "A", "B")
    state = reduce(tiny, state, CellClick(0, 1))
    state = press(tiny, state, "Delete")
    assert state.to_rows() == [["A", ""], ["", ""]]
    assert state.active_cell == (0, 0)


def test_backspace_does_not_step_onto_black(ring):
    state = reduce(ring, initial_state(ring), CellClick(2, 1))
    state = press(ring, state, " ")
    assert state.direction == DOWN
    state = press(ring, state, "Backspace")
    assert state.active_cell == (2, 1)


def test_space_and_tab_toggle_without_moving(tiny):
    state = initial_state(tiny)
    state = press(tiny, state, " ")
    assert (state.direction, state.active_cell) == (DOWN, (0, 0))
    state = press(tiny, state, "Tab")
    assert (state.direction, state.active_cell) == (ACROSS, (0, 0))


def test_arrows_skip_black_cells(ring):
    state = reduce(ring, initial_state(ring), CellClick(0, 1))
    state = press(ring, state, "ArrowDown")
    assert state.active_cell == (2, 1)


def test_arrow_at_edge_does_not_move(ring):
    state = press(ring, initial_state(ring), "ArrowUp", "ArrowLeft")
    assert state.active_cell == (0, 0)


def test_arrow_with_only_black_cells_ahead_does_not_move():
    layout = PuzzleLayout(rows=1, cols=3, grid=[".##"], clues={})
    state = press(layout, initial_state(layout), "ArrowRight")
    assert state.active_cell == (0, 0)


def test_click_active_cell_toggles(tiny):
    state = reduce(tiny, initial_state(tiny), CellClick(0, 0))
    assert state.direction == DOWN
    assert state.active_cell == (0, 0)


def test_click_switches_to_direction_with_a_clue(ring):
    state = reduce(ring, initial_state(ring), CellClick(1, 0))
    assert state.active_cell == (1, 0)
    assert state.direction == DOWN

    state = reduce(ring, state, CellClick(0, 1))
    assert state.direction == ACROSS


def test_click_black_cell_ignored(ring):
    state = initial_state(ring)
    assert reduce(ring, state, CellClick(1, 1)) == state


def test_clue_click_jumps_to_start(ring):
    state = reduce(ring, initial_state(ring), ClueClick(2, DOWN))
    assert state.active_cell == (0, 2)
    assert state.direction == DOWN
    assert active_clue(ring, state).answer == "TAG"
    assert clue_cells(ring, state) == [(0, 2), (1, 2), (2, 2)]


def test_clue_cells_empty_without_clue():
    layout = PuzzleLayout(1, 1, ["."], {ACROSS: [], DOWN: []})
    assert clue_cells(layout, initial_state(layout)) == []


def test_unknown_keys_ignored(tiny):
    state = initial_state(tiny)
    assert press(tiny, state, "Shift", "1", "Enter") == state


def test_remote_cell_update_keeps_focus(tiny):
    state = press(tiny, initial_state(tiny), " ")
    remote = reduce(tiny, state, RemoteMessage({"type": "cell_update", "row": 1, "col": 1, "value": "Y", "userId": "u2"}))
    assert remote.value_at(1, 1) == "Y"
    assert remote.active_cell == state.active_cell
    assert remote.direction == DOWN


def test_remote_out_of_bounds_ignored(tiny):
    state = initial_state(tiny)
    assert reduce(tiny, state, RemoteMessage({"type": "cell_update", "row": 5, "col": 0, "value": "Y"})) == state


def test_remote_progress_update_replaces_grid(tiny):
    state = press(tiny, initial_state(tiny), "A")
    remote = reduce(tiny, state, RemoteMessage({"type": "progress_update", "grid": [["", "T"], ["B", "Y"]]}))
    assert remote.to_rows() == [["", "T"], ["B", "Y"]]
    assert remote.active_cell == (0, 1)


@pytest.mark.parametrize("grid", [
    [["A"], ["B", "C"]],
    [["A", "B"]],
    [["A", "B"], "CD"],
    [["A", 1], ["", ""]],
    [["AB", ""], ["", ""]],
])
def test_remote_progress_update_with_bad_grid_ignored(tiny, grid):
    state = initial_state(tiny)
    assert reduce(tiny, state, RemoteMessage({"type": "progress_update", "grid": grid})) == state
    # the reducer keeps working on the untouched grid
    assert press(tiny, state, "Z", "Q", "X").to_rows() == [["Z", "Q"], ["X", ""]]


def test_remote_values_are_normalised(tiny):
    state = initial_state(tiny)
    lower = reduce(tiny, state, RemoteMessage({"type": "cell_update", "row": 0, "col": 1, "value": "t"}))
    assert lower.value_at(0, 1) == "T"
    grid = reduce(tiny, state, RemoteMessage({"type": "progress_update", "grid": [["a", ""], ["", "y"]]}))
    assert grid.to_rows() == [["A", ""], ["", "Y"]]


@pytest.mark.parametrize("value", [7, "XY", "?", ["A"]])
def test_remote_cell_update_with_bad_value_ignored(tiny, value):
    state = initial_state(tiny)
    assert reduce(tiny, state, RemoteMessage({"type": "cell_update", "row": 0, "col": 0, "value": value})) == state


def test_incorrect_cells_and_filled_clues(tiny):
    state = press(tiny, initial_state(tiny), "A", "X")
    assert incorrect_cells(tiny, state) == {(0, 1)}
    assert is_clue_filled(state, tiny.find_clue(1, ACROSS))
    assert not is_clue_filled(state, tiny.find_clue(1, DOWN))


def test_reveal_requires_relaxed_difficulty(tiny):
    state = initial_state(tiny)
    with pytest.raises(RevealNotAllowed):
        reveal_clue(tiny, state, "standard")
    with pytest.raises(RevealNotAllowed):
        reveal_puzzle(tiny, state, "standard")

    assert reveal_clue(tiny, state, "easy").to_rows() == [["A", "T"], ["", ""]]
    assert reveal_puzzle(tiny, state, "learner").to_rows() == [["A", "T"], ["B", "Y"]]


def test_local_updates_lists_changed_cells(tiny):
    before = initial_state(tiny)
    after = press(tiny, before, "A")
    assert local_updates(before, after) == [{"type": "cell_update", "row": 0, "col": 0, "value": "A"}]
