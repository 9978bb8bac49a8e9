"""Depth-first, line-aware traversal of a python-chess game tree."""

from typing import Iterator, Optional

import chess
import chess.pgn

from pgnbrowser.models.navigation_index import NavigationIndex
from pgnbrowser.models.traversal_events import (
    EnterVariation,
    ExitVariation,
    TraversalEvent,
    VisitPly,
)
from pgnbrowser.services.nag_service import NagService
from pgnbrowser.services.position_snapshot import BoardPosition
from pgnbrowser.services.traversal_listener import TraversalListener


class GameTraversalService:
    """Walks a game's move tree and fires traversal events in emission order.

    At every node the main continuation is emitted first, then each
    alternative to it as a side line (with its own nested side lines), and
    only then does the parent line resume. A single board is advanced in
    place while walking; each VisitPly is yielded with the board standing
    right after that move.
    """

    @staticmethod
    def iter_events(
        game: chess.pgn.Game,
        board: chess.Board,
        with_lines: bool = True,
    ) -> Iterator[TraversalEvent]:
        """Generate the traversal events of a game.

        Args:
            game: Parsed game (root node).
            board: Board set to the game's start position. It is mutated while
                the generator runs and is back at the start position when the
                generator is exhausted.
            with_lines: If False, only the main line is emitted.

        Yields:
            EnterVariation, ExitVariation and VisitPly events.
        """
        yield from GameTraversalService._traverse_line(game, board, 0, with_lines)

    @staticmethod
    def _traverse_line(
        node: chess.pgn.GameNode,
        board: chess.Board,
        level: int,
        with_lines: bool,
    ) -> Iterator[TraversalEvent]:
        """Emit the line continuing from node, starting with its main continuation."""
        pushed = 0
        while node.variations:
            main = node.variations[0]
            yield GameTraversalService._push_and_visit(main, board, level)
            pushed += 1

            if with_lines:
                for alternative in node.variations[1:]:
                    # The side line replaces the move just played
                    board.pop()
                    yield EnterVariation(level + 1)
                    yield GameTraversalService._push_and_visit(alternative, board, level + 1)
                    yield from GameTraversalService._traverse_line(alternative, board, level + 1, with_lines)
                    board.pop()
                    yield ExitVariation(level + 1)
                    board.push(main.move)

            node = main

        for _ in range(pushed):
            board.pop()

    @staticmethod
    def _push_and_visit(node: chess.pgn.ChildNode, board: chess.Board, level: int) -> VisitPly:
        """Play node's move on the board and describe it.

        A comment placed before the first move of a side line is kept ahead of
        the move's own comment.
        """
        comment = " ".join(text for text in (node.starting_comment, node.comment) if text)
        ply_number = board.ply()
        move_text = board.san(node.move)
        board.push(node.move)
        return VisitPly(
            move_text=move_text,
            annotation_tags=NagService.annotation_tags(node.nags),
            comment=comment or None,
            ply_number=ply_number,
            level=level,
        )

    @staticmethod
    def build_index(
        game: chess.pgn.Game,
        with_lines: bool = True,
        listener: Optional[TraversalListener] = None,
    ) -> NavigationIndex:
        """Flatten a game into a sealed NavigationIndex.

        Args:
            game: Parsed game (root node).
            with_lines: If False, side lines are skipped.
            listener: Listener to drive. Must wrap the board this call advances,
                so it is normally left as None and created here.

        Returns:
            The sealed navigation index.
        """
        board = game.board()
        if listener is None:
            listener = TraversalListener(BoardPosition(board))
        return GameTraversalService.traverse(game, listener, board, with_lines)

    @staticmethod
    def traverse(
        game: chess.pgn.Game,
        listener: TraversalListener,
        board: chess.Board,
        with_lines: bool = True,
    ) -> NavigationIndex:
        """Drive a listener through the game.

        Args:
            game: Parsed game (root node).
            listener: Listener whose position view wraps board.
            board: Board set to the game's start position, advanced in place.
            with_lines: If False, side lines are skipped.

        Returns:
            The sealed navigation index.
        """
        return listener.build(GameTraversalService.iter_events(game, board, with_lines))
