"""Tests for stone codes, square order and snapshot capture."""

import chess
import pytest

from pgnbrowser.services.position_snapshot import (
    SQUARE_ORDER,
    BoardPosition,
    capture_snapshot,
    is_white_square,
    offset_stone,
    stone_for_piece,
)


def test_square_order_is_document_order():
    assert SQUARE_ORDER[0] == chess.A8
    assert SQUARE_ORDER[7] == chess.H8
    assert SQUARE_ORDER[56] == chess.A1
    assert SQUARE_ORDER[63] == chess.H1
    assert sorted(SQUARE_ORDER) == list(range(64))


def test_stone_codes():
    assert stone_for_piece(None) == 0
    assert stone_for_piece(chess.Piece(chess.KING, chess.WHITE)) == 6
    assert stone_for_piece(chess.Piece(chess.KING, chess.BLACK)) == -6
    assert stone_for_piece(chess.Piece(chess.PAWN, chess.BLACK)) == -1
    assert offset_stone(-6) == 0
    assert offset_stone(0) == 6
    assert offset_stone(6) == 12
    with pytest.raises(ValueError):
        offset_stone(7)


def test_initial_position_snapshot():
    snapshot = capture_snapshot(BoardPosition(chess.Board()))

    assert snapshot.stone_at(0) == offset_stone(-chess.ROOK)  # a8
    assert snapshot.stone_at(4) == offset_stone(-chess.KING)  # e8
    assert snapshot.stone_at(59) == offset_stone(chess.QUEEN)  # d1
    assert snapshot.stone_at(60) == offset_stone(chess.KING)  # e1
    assert snapshot.stone_at(52) == offset_stone(chess.PAWN)  # e2
    assert snapshot.stone_at(36) == 6  # e4 empty


def test_snapshot_does_not_alias_board():
    board = chess.Board()
    position = BoardPosition(board)
    board.push_san("e4")
    snapshot = capture_snapshot(position)

    board.push_san("e5")
    board.push_san("Qh5")
    board.pop()
    board.pop()
    board.pop()

    assert position.stone_at(36) == 6
    assert snapshot.stone_at(36) == offset_stone(chess.PAWN)
    assert snapshot.stone_at(52) == 6


def test_square_colours():
    assert is_white_square(0)  # a8
    assert not is_white_square(1)  # b8
    assert not is_white_square(56)  # a1
    assert is_white_square(63)  # h1
