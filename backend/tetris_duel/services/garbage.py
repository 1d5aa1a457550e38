import random
from dataclasses import replace
from typing import Tuple

from tetris_duel.models import COLS, EMPTY, ROWS, Board, Cell, PlayerState
from .board import is_valid_placement

# Garbage never pushes the board below this many usable rows
MIN_USABLE_ROWS = 4


def insert_garbage_rows(board: Board, count: int, rng=None) -> Tuple[Board, int]:
    """Shift rows up by ``count`` and fill the bottom with gapped garbage rows.

    Each garbage row has exactly one empty cell at an independently chosen
    random column. Returns the new board and the number of rows inserted.
    """
    rng = rng or random
    lines_to_add = min(count, ROWS - MIN_USABLE_ROWS)
    if lines_to_add <= 0:
        return board, 0
    rows = list(board[lines_to_add:])
    for _ in range(lines_to_add):
        gap = rng.randrange(COLS)
        rows.append(tuple(EMPTY if col == gap else Cell.garbage() for col in range(COLS)))
    return tuple(rows), lines_to_add


def apply_garbage(state: PlayerState, count: int, rng=None) -> Tuple[PlayerState, int]:
    """Insert garbage into a player's board and keep the active piece placeable.

    If the piece now overlaps, it is probed upwards one row at a time; when
    no row down to 0 fits, the player's game is over.
    """
    if state.game_over:
        return state, 0
    board, added = insert_garbage_rows(state.board, count, rng)
    if not added:
        return state, 0
    state = replace(state, board=board)
    if is_valid_placement(board, state.piece, state.x, state.y):
        return state, added
    for new_y in range(state.y - 1, -1, -1):
        if is_valid_placement(board, state.piece, state.x, new_y):
            return replace(state, y=new_y), added
    return replace(state, game_over=True), added
