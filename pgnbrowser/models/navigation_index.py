"""Navigation index: a move tree flattened into randomly addressable ply records."""

from dataclasses import dataclass, replace, asdict
from typing import Any, Dict, List, Optional, Tuple


NUM_OF_SQUARES = 64


@dataclass(frozen=True)
class PositionSnapshot:
    """Immutable copy of all 64 squares at one ply, in document order (a8..h8, ..., a1..h1)."""
    stones: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.stones) != NUM_OF_SQUARES:
            raise ValueError(f"Snapshot must hold {NUM_OF_SQUARES} squares, got {len(self.stones)}")

    def stone_at(self, square_index: int) -> int:
        """Get the stored stone value of a square (0..63, document order)."""
        return self.stones[square_index]

    def to_list(self) -> List[int]:
        return list(self.stones)


@dataclass(frozen=True)
class PlyRecord:
    """One visited half-move. Index 0 is the synthetic start position and carries no move."""
    index: int
    level: int
    back_pointer: int
    move_text: str = ""
    annotation_tags: Tuple[str, ...] = ()
    comment: Optional[str] = None
    move_number: int = 0  # Full-move counter shown next to the move (0 for the start record)
    show_move_number: bool = False
    is_white: bool = False
    line_start: bool = False
    line_end: bool = False
    variations_opened: int = 0  # Side lines opening right before this ply
    variations_closed: int = 0  # Side lines closing right after this ply

    @property
    def is_main_line(self) -> bool:
        return self.level == 0


class NavigationIndex:
    """Ordered ply records plus the parallel position snapshot table.

    The index is populated only through append() while a traversal is running,
    then sealed. Once sealed it is read-only and answers the go/back/forward
    queries a viewer needs to step through any line of the game.
    """

    def __init__(self) -> None:
        """Initialize an empty, unsealed index."""
        self._plies: List[PlyRecord] = []
        self._snapshots: List[PositionSnapshot] = []
        self._sealed = False

    # ------------------------------------------------------------------
    # Construction

    def append(self, ply: PlyRecord, snapshot: PositionSnapshot) -> None:
        """Append a ply record and its snapshot.

        Args:
            ply: Record whose index must equal the current count.
            snapshot: Position after the ply.

        Raises:
            RuntimeError: If the index is sealed.
            ValueError: If the record index or back pointer breaks emission order.
        """
        self._check_not_sealed()
        expected = len(self._plies)
        if ply.index != expected:
            raise ValueError(f"Ply index {ply.index} out of emission order (expected {expected})")
        if ply.index > 0 and not 0 <= ply.back_pointer < ply.index:
            raise ValueError(f"Ply {ply.index} has back pointer {ply.back_pointer} outside [0, {ply.index})")
        if ply.index == 0 and ply.back_pointer != 0:
            raise ValueError("Start record must point back to itself")
        self._plies.append(ply)
        self._snapshots.append(snapshot)

    def update_ply(self, index: int, **changes: Any) -> PlyRecord:
        """Replace display flags of an already appended record.

        Args:
            index: Record index.
            **changes: Field values to change. index and back_pointer cannot be changed.

        Returns:
            The updated record.
        """
        self._check_not_sealed()
        if 'index' in changes or 'back_pointer' in changes:
            raise ValueError("index and back_pointer are immutable once assigned")
        updated = replace(self._plies[index], **changes)
        self._plies[index] = updated
        return updated

    def seal(self) -> 'NavigationIndex':
        """Make the index read-only.

        Raises:
            RuntimeError: If the index holds no start record.
        """
        if not self._plies:
            raise RuntimeError("Cannot seal an empty navigation index")
        self._sealed = True
        return self

    def _check_not_sealed(self) -> None:
        if self._sealed:
            raise RuntimeError("Navigation index is sealed")

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------------
    # Accessors

    @property
    def count(self) -> int:
        """Number of ply records including the start position."""
        return len(self._plies)

    def __len__(self) -> int:
        return len(self._plies)

    @property
    def plies(self) -> Tuple[PlyRecord, ...]:
        return tuple(self._plies)

    @property
    def snapshots(self) -> Tuple[PositionSnapshot, ...]:
        return tuple(self._snapshots)

    @property
    def back_pointers(self) -> List[int]:
        return [ply.back_pointer for ply in self._plies]

    @property
    def levels(self) -> List[int]:
        return [ply.level for ply in self._plies]

    def ply_at(self, n: int) -> PlyRecord:
        """Get the ply record at the clamped index n."""
        return self._plies[self.go_to(n)]

    def snapshot_at(self, n: int) -> PositionSnapshot:
        """Get the position snapshot at the clamped index n."""
        return self._snapshots[self.go_to(n)]

    # ------------------------------------------------------------------
    # Navigation

    def go_to(self, n: int) -> int:
        """Clamp n into [0, count - 1]. Out-of-range requests are not an error."""
        if n < 0:
            return 0
        if n >= self.count:
            return self.count - 1
        return n

    def go_backward(self, n: int) -> int:
        """Index of the ply that n continues from. The start position stays where it is."""
        return self.go_to(self._plies[self.go_to(n)].back_pointer)

    def go_forward(self, n: int) -> int:
        """Index of a ply continuing from n.

        Several plies may continue from n when side lines branch there; the
        highest index wins, i.e. the most recently recorded line. Returns n
        unchanged when nothing continues from it.
        """
        n = self.go_to(n)
        for candidate in range(self.count - 1, n, -1):
            if self._plies[candidate].back_pointer == n:
                return candidate
        return n

    def goto_start(self) -> int:
        return self.go_to(0)

    def goto_end(self) -> int:
        return self.go_to(self.count - 1)

    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-ready representation for renderers."""
        return {
            "count": self.count,
            "back_pointers": self.back_pointers,
            "snapshots": [snapshot.to_list() for snapshot in self._snapshots],
            "plies": [
                dict(asdict(ply), annotation_tags=list(ply.annotation_tags))
                for ply in self._plies
            ],
        }
