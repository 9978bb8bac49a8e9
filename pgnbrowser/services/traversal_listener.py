"""Traversal listener that flattens a move tree into a NavigationIndex."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from pgnbrowser.models.navigation_index import NavigationIndex, PlyRecord
from pgnbrowser.models.traversal_events import EventKind, TraversalEvent
from pgnbrowser.services.logging_service import LoggingService
from pgnbrowser.services.position_snapshot import StonePosition, capture_snapshot


class TraversalContractError(RuntimeError):
    """The traversal driver fired events in an order that cannot come from a move tree."""


@dataclass
class _OpenVariation:
    """Bookkeeping for a side line that has been entered but not exited yet."""
    level: int
    first_index: int  # Index the first ply of the line gets (if it has any)


class TraversalListener:
    """Builds one NavigationIndex from one depth-first traversal.

    The driver fires enter/exit/visit events in emission order: the plies of a
    side line come right after the ply at which the line branches off, before
    the parent line resumes. The listener never looks at the tree itself.

    For each ply the listener records a back pointer, the index of the ply it
    continues from. The branch cursor table maps a nesting level to the last
    index emitted at or below that level; entering a side line seeds its level
    from the parent level, so the first ply of a line points back to the last
    ply emitted on the parent line.

    One instance serves one traversal at a time. begin() and finish() bracket
    a traversal; the instance can be reused afterwards, but not concurrently.
    """

    def __init__(self, position: StonePosition) -> None:
        """Initialize the listener.

        Args:
            position: Read-only view of the position the driver advances. It is
                copied on every visit, never stored.
        """
        self._position = position
        self._logger = LoggingService.get_instance()
        self._index: Optional[NavigationIndex] = None
        self._branch_cursor: Dict[int, int] = {}
        self._open_variations: List[_OpenVariation] = []
        self._next_index = 0
        self._show_move_number = True
        self._pending_line_start = False
        self._pending_opens = 0
        self._max_level = 0

    @property
    def in_progress(self) -> bool:
        """True between begin() and finish()."""
        return self._index is not None

    # ------------------------------------------------------------------
    # Traversal lifecycle

    def begin(self) -> None:
        """Start a traversal: record the start position as ply 0.

        Raises:
            RuntimeError: If a traversal is already in progress on this instance.
        """
        if self._index is not None:
            raise RuntimeError("Traversal already in progress on this listener")

        self._index = NavigationIndex()
        self._branch_cursor = {0: 0}
        self._open_variations = []
        self._show_move_number = True
        self._pending_line_start = False
        self._pending_opens = 0
        self._max_level = 0

        start = PlyRecord(index=0, level=0, back_pointer=0)
        self._index.append(start, capture_snapshot(self._position))
        self._next_index = 1

    def finish(self) -> NavigationIndex:
        """End the traversal and hand out the sealed index.

        Raises:
            TraversalContractError: If a side line was entered but never exited.
        """
        index = self._require_index()
        if self._open_variations:
            levels = [variation.level for variation in self._open_variations]
            raise self._contract_violation(f"Traversal finished with open variations at levels {levels}")

        index.seal()
        self._logger.debug(
            f"Navigation index built: {index.count} plies, max variation depth {self._max_level}"
        )
        self._index = None
        self._branch_cursor = {}
        return index

    def build(self, events: Iterable[TraversalEvent]) -> NavigationIndex:
        """Run a full traversal over an event stream.

        The position passed at construction must be advanced by whoever
        produces the events, in step with the stream.
        """
        self.begin()
        try:
            for event in events:
                self.dispatch(event)
        except BaseException:
            self._abort()
            raise
        return self.finish()

    def _abort(self) -> None:
        """Drop partial state; no partial index is ever handed out."""
        self._index = None
        self._branch_cursor = {}
        self._open_variations = []

    def _contract_violation(self, message: str) -> TraversalContractError:
        """Abort the traversal and build the error to raise."""
        self._abort()
        self._logger.error(f"Traversal contract violation: {message}")
        return TraversalContractError(message)

    def _require_index(self) -> NavigationIndex:
        if self._index is None:
            raise RuntimeError("No traversal in progress, call begin() first")
        return self._index

    # ------------------------------------------------------------------
    # Events

    def dispatch(self, event: TraversalEvent) -> None:
        """Route one traversal event to its handler."""
        kind = getattr(event, "kind", None)
        if kind is EventKind.VISIT_PLY:
            self.visit_ply(
                event.move_text,
                event.annotation_tags,
                event.comment,
                event.ply_number,
                event.level,
            )
        elif kind is EventKind.ENTER_VARIATION:
            self.enter_variation(event.level)
        elif kind is EventKind.EXIT_VARIATION:
            self.exit_variation(event.level)
        else:
            raise TypeError(f"Unknown traversal event: {event!r}")

    def enter_variation(self, level: int) -> None:
        """A side line nested at depth level starts.

        Raises:
            TraversalContractError: If level is not exactly one deeper than the current line.
        """
        self._require_index()
        current_level = self._current_level()
        if level != current_level + 1:
            raise self._contract_violation(
                f"Variation at level {level} entered from level {current_level}"
            )

        self._branch_cursor[level] = self._branch_cursor[level - 1]
        self._open_variations.append(_OpenVariation(level=level, first_index=self._next_index))
        self._pending_line_start = True
        self._pending_opens += 1
        self._show_move_number = True
        self._max_level = max(self._max_level, level)

    def exit_variation(self, level: int) -> None:
        """The side line at depth level ends.

        Raises:
            TraversalContractError: If level is not the innermost open side line.
        """
        index = self._require_index()
        if not self._open_variations or self._open_variations[-1].level != level:
            raise self._contract_violation(f"Exit from level {level} without a matching enter")

        variation = self._open_variations.pop()
        if self._next_index > variation.first_index:
            last_on_line = self._branch_cursor[level]
            if last_on_line >= variation.first_index:
                index.update_ply(last_on_line, line_end=True)
            last_emitted = self._next_index - 1
            closed = index.ply_at(last_emitted).variations_closed
            index.update_ply(last_emitted, variations_closed=closed + 1)
        else:
            # Empty side line: the opening bracket was never attached to a ply
            self._pending_opens -= 1
            self._pending_line_start = bool(
                self._open_variations and self._open_variations[-1].first_index == self._next_index
            )

        self._show_move_number = True

    def visit_ply(
        self,
        move_text: str,
        annotation_tags: Sequence[str],
        comment: Optional[str],
        ply_number: int,
        level: int,
    ) -> None:
        """Record one half-move; the driver's position is already past it.

        Args:
            move_text: Move notation, passed through verbatim.
            annotation_tags: Short annotation codes in display order.
            comment: Comment text or None, passed through verbatim.
            ply_number: Ply count before the move (even = White's move).
            level: Nesting depth of the line the ply belongs to.

        Raises:
            TraversalContractError: If level is not the innermost open line.
        """
        index = self._require_index()
        current_level = self._current_level()
        if level != current_level:
            raise self._contract_violation(
                f"Ply at level {level} visited while the innermost open line is level {current_level}"
            )

        # Copy now: the driver mutates the position again before the next visit
        snapshot = capture_snapshot(self._position)

        annotation_tags = tuple(annotation_tags)
        is_white = ply_number % 2 == 0
        record = PlyRecord(
            index=self._next_index,
            level=level,
            back_pointer=self._branch_cursor[level],
            move_text=move_text,
            annotation_tags=annotation_tags,
            comment=comment,
            move_number=ply_number // 2 + 1,
            show_move_number=self._show_move_number,
            is_white=is_white,
            line_start=self._pending_line_start,
            variations_opened=self._pending_opens,
        )
        index.append(record, snapshot)

        self._pending_line_start = False
        self._pending_opens = 0
        # Black's move follows a White move without a number unless annotations interrupt the pair
        self._show_move_number = not is_white or bool(annotation_tags)

        self._branch_cursor[level] = self._next_index
        self._next_index += 1

    def _current_level(self) -> int:
        if self._open_variations:
            return self._open_variations[-1].level
        return 0
