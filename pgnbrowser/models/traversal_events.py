"""Traversal events fired by a depth-first walk over a game's move tree."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class EventKind(Enum):
    """Kinds of traversal events."""
    ENTER_VARIATION = "enter_variation"
    EXIT_VARIATION = "exit_variation"
    VISIT_PLY = "visit_ply"


@dataclass(frozen=True)
class EnterVariation:
    """Traversal descends into a side line.

    level is the nesting depth of the side line (1 for a variation of the main line).
    """
    level: int
    kind: EventKind = field(default=EventKind.ENTER_VARIATION, init=False, repr=False)


@dataclass(frozen=True)
class ExitVariation:
    """Traversal returns from the side line at the given nesting depth."""
    level: int
    kind: EventKind = field(default=EventKind.EXIT_VARIATION, init=False, repr=False)


@dataclass(frozen=True)
class VisitPly:
    """One half-move, fired after the driver's position has been advanced past it."""
    move_text: str
    annotation_tags: Tuple[str, ...] = ()
    comment: Optional[str] = None
    ply_number: int = 0  # Ply count before the move (even = White's move)
    level: int = 0
    kind: EventKind = field(default=EventKind.VISIT_PLY, init=False, repr=False)


TraversalEvent = Union[EnterVariation, ExitVariation, VisitPly]
