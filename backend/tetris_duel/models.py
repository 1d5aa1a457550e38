from dataclasses import dataclass
from typing import Optional, Tuple
import random

ROWS = 20
COLS = 10

# Omits visually confusable characters (0/O, 1/I)
GAME_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'

GARBAGE_COLOR = '#808080'

EMPTY_KIND = 'empty'
FILLED_KIND = 'filled'
GARBAGE_KIND = 'garbage'


@dataclass(frozen=True)
class Cell:
    kind: str = EMPTY_KIND
    color: Optional[str] = None

    @classmethod
    def filled(cls, color: str) -> 'Cell':
        return cls(FILLED_KIND, color)

    @classmethod
    def garbage(cls, color: str = GARBAGE_COLOR) -> 'Cell':
        return cls(GARBAGE_KIND, color)

    @property
    def is_empty(self) -> bool:
        return self.kind == EMPTY_KIND

    def to_wire(self):
        return 0 if self.is_empty else self.color


EMPTY = Cell()

Row = Tuple[Cell, ...]
Board = Tuple[Row, ...]


def empty_row() -> Row:
    return (EMPTY,) * COLS


def empty_board() -> Board:
    return tuple(empty_row() for _ in range(ROWS))


def board_to_wire(board: Board):
    return [[cell.to_wire() for cell in row] for row in board]


@dataclass(frozen=True)
class Piece:
    kind: str
    shape: Tuple[Tuple[int, ...], ...]
    color: str

    @property
    def width(self) -> int:
        return len(self.shape[0])

    def cells(self):
        """Yield (row, col) offsets of every occupied cell in the shape."""
        for r, line in enumerate(self.shape):
            for c, value in enumerate(line):
                if value:
                    yield r, c

    def to_dict(self):
        return {
            'kind': self.kind,
            'shape': [list(line) for line in self.shape],
            'color': self.color,
        }


@dataclass(frozen=True)
class PlayerState:
    id: int
    board: Board
    piece: Piece
    x: int
    y: int
    score: int = 0
    lines_cleared: int = 0
    game_over: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'board': board_to_wire(self.board),
            'currentPiece': self.piece.to_dict(),
            'currentX': self.x,
            'currentY': self.y,
            'score': self.score,
            'linesCleared': self.lines_cleared,
            'gameOver': self.game_over,
        }

    def to_opponent_dict(self):
        """Reduced view relayed to the other participant of a room."""
        return {
            'playerId': self.id,
            'board': board_to_wire(self.board),
            'score': self.score,
            'linesCleared': self.lines_cleared,
            'gameOver': self.game_over,
        }


WAITING = 'waiting'
PLAYING = 'playing'
ENDED = 'ended'


@dataclass
class Room:
    code: str
    host: int
    guest: Optional[int] = None
    status: str = WAITING  # waiting, playing, ended

    def other(self, session_id: int) -> Optional[int]:
        if session_id == self.host:
            return self.guest
        if session_id == self.guest:
            return self.host
        return None


def generate_game_code(taken, rng=None, length=6):
    """Generate a short game code not present in ``taken``."""
    rng = rng or random
    while True:
        code = ''.join(rng.choice(GAME_CODE_ALPHABET) for _ in range(length))
        if code not in taken:
            return code
