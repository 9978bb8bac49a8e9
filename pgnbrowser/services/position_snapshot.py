"""Read-only position capability and snapshot capture.

Squares are addressed 0..63 in document order: rank 8 to rank 1, file a to h.
Stone values are offset so that they index the 13-entry image tables directly:
0 = black king ... 6 = empty ... 12 = white king.
"""

from typing import List, Protocol

import chess

from pgnbrowser.models.navigation_index import NUM_OF_SQUARES, PositionSnapshot


# Signed stones: White positive, Black negative, magnitude = chess piece type
NO_STONE = 0
MIN_STONE = -chess.KING
MAX_STONE = chess.KING
NUM_OF_STONES = MAX_STONE - MIN_STONE + 1

# chess square for each document-order square index
SQUARE_ORDER: List[int] = [
    chess.square(file_index, rank_index)
    for rank_index in range(7, -1, -1)
    for file_index in range(8)
]


def stone_for_piece(piece) -> int:
    """Signed stone for a chess.Piece (or None for an empty square)."""
    if piece is None:
        return NO_STONE
    return piece.piece_type if piece.color == chess.WHITE else -piece.piece_type


def offset_stone(stone: int) -> int:
    """Convert a signed stone (-6..6) into its stored value (0..12)."""
    if not MIN_STONE <= stone <= MAX_STONE:
        raise ValueError(f"Invalid stone value: {stone}")
    return stone - MIN_STONE


def is_white_square(square_index: int) -> bool:
    """True if the document-order square is a light square (a8 is light)."""
    return (square_index // 8) % 2 == square_index % 2


class StonePosition(Protocol):
    """Anything that can report the stored stone value of a document-order square."""

    def stone_at(self, square_index: int) -> int:
        ...


class BoardPosition:
    """Read-only view of a live chess.Board.

    The wrapped board is typically advanced in place by a traversal driver,
    so values read through this view change as the traversal proceeds.
    Use capture_snapshot() to keep the state of one moment.
    """

    def __init__(self, board: chess.Board) -> None:
        self._board = board

    def stone_at(self, square_index: int) -> int:
        piece = self._board.piece_at(SQUARE_ORDER[square_index])
        return offset_stone(stone_for_piece(piece))


def capture_snapshot(position: StonePosition) -> PositionSnapshot:
    """Copy all 64 squares of the position as they are right now."""
    return PositionSnapshot(
        stones=tuple(position.stone_at(square_index) for square_index in range(NUM_OF_SQUARES))
    )
