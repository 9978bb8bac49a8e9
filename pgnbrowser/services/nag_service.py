"""Service for turning NAGs (Numeric Annotation Glyphs) into short display strings."""

from typing import Dict, Iterable, Tuple


# Short strings for the common NAGs
# Based on PGN standard: https://wimnij.home.xs4all.nl/euwe/NAGS.html
NAG_SHORT_STRINGS: Dict[int, str] = {
    1: "!",      # good move
    2: "?",      # poor move
    3: "!!",     # very good move
    4: "??",     # very poor move
    5: "!?",     # speculative move
    6: "?!",     # questionable move
    7: "□",  # forced move
    10: "=",     # drawish position
    13: "∞",  # unclear position
    14: "⩲",  # White has a slight advantage
    15: "⩱",  # Black has a slight advantage
    16: "±",  # White has a moderate advantage
    17: "∓",  # Black has a moderate advantage
    18: "+-",    # White has a decisive advantage
    19: "-+",    # Black has a decisive advantage
    22: "⨀",  # White is in zugzwang
    23: "⨀",  # Black is in zugzwang
    32: "⟳",  # White has a moderate time (development) advantage
    33: "⟳",  # Black has a moderate time (development) advantage
    36: "↑",  # White has the initiative
    37: "↑",  # Black has the initiative
    40: "→",  # White has the attack
    41: "→",  # Black has the attack
    44: "=∞",  # White has sufficient compensation for material deficit
    45: "=∞",  # Black has sufficient compensation for material deficit
    132: "⇆",  # White has moderate counterplay
    133: "⇆",  # Black has moderate counterplay
    146: "N",    # novelty
}


class NagService:
    """Maps NAG numbers to the short codes shown after a move."""

    @staticmethod
    def get_short_string(nag: int) -> str:
        """Get the short display string for a NAG.

        Args:
            nag: The NAG number (e.g., 1, 2, 146).

        Returns:
            The symbol if one is defined, otherwise "$<number>".
        """
        if nag < 0:
            raise ValueError(f"Invalid NAG: {nag}")
        return NAG_SHORT_STRINGS.get(nag, f"${nag}")

    @staticmethod
    def annotation_tags(nags: Iterable[int]) -> Tuple[str, ...]:
        """Convert a collection of NAGs into ordered short codes.

        NAG 0 (null annotation) is dropped.

        Args:
            nags: NAG numbers, in any order (python-chess stores them as a set).

        Returns:
            Short codes ordered by NAG number.
        """
        return tuple(NagService.get_short_string(nag) for nag in sorted(nags) if nag != 0)
