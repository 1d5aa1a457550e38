import random

from tetris_duel.models import Piece

TETROMINOES = {
    'I': Piece('I', ((0, 0, 0, 0),
                     (1, 1, 1, 1),
                     (0, 0, 0, 0),
                     (0, 0, 0, 0)), '#00FFFF'),
    'O': Piece('O', ((1, 1),
                     (1, 1)), '#FFFF00'),
    'T': Piece('T', ((0, 1, 0),
                     (1, 1, 1),
                     (0, 0, 0)), '#800080'),
    'S': Piece('S', ((0, 1, 1),
                     (1, 1, 0),
                     (0, 0, 0)), '#00FF00'),
    'Z': Piece('Z', ((1, 1, 0),
                     (0, 1, 1),
                     (0, 0, 0)), '#FF0000'),
    'J': Piece('J', ((1, 0, 0),
                     (1, 1, 1),
                     (0, 0, 0)), '#0000FF'),
    'L': Piece('L', ((0, 0, 1),
                     (1, 1, 1),
                     (0, 0, 0)), '#FF7F00'),
}

PIECE_KINDS = tuple(TETROMINOES)


def draw_piece(rng=None) -> Piece:
    """Return a uniformly random piece from the catalog."""
    rng = rng or random
    return TETROMINOES[rng.choice(PIECE_KINDS)]
