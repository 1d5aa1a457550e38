"""Board engine: pure transforms over a single player's board and piece.

Nothing here knows about rooms or connections. Every operation takes a
``PlayerState`` and returns a new one together with a result flag; the
caller decides what to push where.
"""
from dataclasses import replace
from typing import Tuple

from tetris_duel.models import (
    COLS,
    ROWS,
    Board,
    Cell,
    Piece,
    PlayerState,
    empty_board,
    empty_row,
)
from .pieces import draw_piece
from .scoring import score_for

LEFT = 'left'
RIGHT = 'right'
DOWN = 'down'

_DELTAS = {
    LEFT: (-1, 0),
    RIGHT: (1, 0),
    DOWN: (0, 1),
}


def is_valid_placement(board: Board, piece: Piece, x: int, y: int) -> bool:
    for row, col in piece.cells():
        board_x = x + col
        board_y = y + row
        if board_x < 0 or board_x >= COLS or board_y >= ROWS:
            return False
        # Cells above the visible board are exempt from the occupancy check
        if board_y >= 0 and not board[board_y][board_x].is_empty:
            return False
    return True


def rotate_clockwise(piece: Piece) -> Piece:
    """Return a new piece whose shape is rotated 90 degrees clockwise."""
    rows = len(piece.shape)
    cols = len(piece.shape[0])
    rotated = [[0] * rows for _ in range(cols)]
    for r in range(rows):
        for c in range(cols):
            rotated[c][rows - 1 - r] = piece.shape[r][c]
    return replace(piece, shape=tuple(tuple(line) for line in rotated))


def spawn_x(piece: Piece) -> int:
    return COLS // 2 - piece.width // 2


def new_player_state(player_id: int, rng=None) -> PlayerState:
    piece = draw_piece(rng)
    return PlayerState(
        id=player_id,
        board=empty_board(),
        piece=piece,
        x=spawn_x(piece),
        y=0,
    )


def move(state: PlayerState, direction: str) -> Tuple[PlayerState, bool]:
    """Shift the active piece one cell; a rejected move leaves ``state`` as is.

    A rejected ``down`` move means the piece has landed. Locking is left to
    the caller.
    """
    if direction not in _DELTAS:
        raise ValueError(f'unknown direction: {direction!r}')
    if state.game_over:
        return state, False
    dx, dy = _DELTAS[direction]
    new_x, new_y = state.x + dx, state.y + dy
    if not is_valid_placement(state.board, state.piece, new_x, new_y):
        return state, False
    return replace(state, x=new_x, y=new_y), True


def rotate(state: PlayerState) -> Tuple[PlayerState, bool]:
    if state.game_over:
        return state, False
    rotated = rotate_clockwise(state.piece)
    if not is_valid_placement(state.board, rotated, state.x, state.y):
        return state, False
    return replace(state, piece=rotated), True


def hard_drop(state: PlayerState) -> Tuple[PlayerState, int]:
    """Move the piece down until the next step would be rejected."""
    distance = 0
    moved = True
    while moved:
        state, moved = move(state, DOWN)
        if moved:
            distance += 1
    return state, distance


def place_piece(board: Board, piece: Piece, x: int, y: int) -> Board:
    rows = [list(line) for line in board]
    for row, col in piece.cells():
        board_y = y + row
        # Cells above row 0 are discarded
        if board_y < 0:
            continue
        rows[board_y][x + col] = Cell.filled(piece.color)
    return tuple(tuple(line) for line in rows)


def clear_completed_lines(board: Board) -> Tuple[Board, int]:
    """Remove complete rows, compacting the board downwards.

    Rows are scanned bottom to top. After a removal the same index is
    examined again since the row above has slid into it.
    """
    rows = list(board)
    cleared = 0
    row = ROWS - 1
    while row >= 0:
        if all(not cell.is_empty for cell in rows[row]):
            del rows[row]
            rows.insert(0, empty_row())
            cleared += 1
            continue
        row -= 1
    return tuple(rows), cleared


def lock(state: PlayerState, rng=None) -> Tuple[PlayerState, int]:
    """Commit the active piece, clear rows, score them and spawn the next piece.

    Returns the new state and the number of rows cleared. If the fresh
    piece cannot be placed at its spawn position the game is over.
    """
    if state.game_over:
        return state, 0
    board = place_piece(state.board, state.piece, state.x, state.y)
    board, cleared = clear_completed_lines(board)
    piece = draw_piece(rng)
    x = spawn_x(piece)
    state = replace(
        state,
        board=board,
        piece=piece,
        x=x,
        y=0,
        score=state.score + score_for(cleared),
        lines_cleared=state.lines_cleared + cleared,
    )
    if not is_valid_placement(board, piece, x, 0):
        state = replace(state, game_over=True)
    return state, cleared
