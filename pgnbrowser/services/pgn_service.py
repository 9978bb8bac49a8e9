"""PGN parsing service for loading chess games from PGN text."""

import io
import re
from pathlib import Path
from typing import List, Optional, Union

import chess.pgn

from pgnbrowser.services.logging_service import LoggingService


class PgnParseResult:
    """Result of parsing PGN text."""

    def __init__(self, success: bool, games: Optional[List[chess.pgn.Game]] = None, error_message: str = "") -> None:
        """Initialize parse result.

        Args:
            success: True if parsing was successful, False otherwise.
            games: List of parsed games.
            error_message: Error message if parsing failed.
        """
        self.success = success
        self.games = games if games is not None else []
        self.error_message = error_message


class PgnService:
    """Service for parsing PGN text into python-chess game trees.

    Parsing, move legality and SAN handling are left to python-chess; this
    service only cleans the input, collects the games and reports problems.
    """

    @staticmethod
    def parse_pgn_text(pgn_text: str) -> PgnParseResult:
        """Parse PGN text (one or more games).

        Args:
            pgn_text: PGN text string.

        Returns:
            PgnParseResult with parsed games or an error message.
        """
        if not pgn_text or not pgn_text.strip():
            return PgnParseResult(False, error_message="Empty PGN text")

        logging_service = LoggingService.get_instance()

        # Remove zero-width spaces and other invisible unicode characters that might interfere
        pgn_text = re.sub(r'[\u200B-\u200D\uFEFF]', '', pgn_text.strip())
        pgn_io = io.StringIO(pgn_text)

        games: List[chess.pgn.Game] = []
        try:
            while True:
                game = chess.pgn.read_game(pgn_io)
                if game is None:
                    break

                # python-chess collects recoverable errors (illegal moves etc.) instead of raising
                for error in game.errors:
                    logging_service.warning(f"PGN game {len(games) + 1}: {error}")

                games.append(game)
        except (ValueError, UnicodeDecodeError) as e:
            return PgnParseResult(False, error_message=f"Error parsing PGN: {str(e)}")

        if not games:
            return PgnParseResult(False, error_message="No valid games found in PGN text")

        logging_service.debug(f"Parsed {len(games)} game(s) from PGN text")
        return PgnParseResult(True, games=games)

    @staticmethod
    def read_pgn_file(path: Union[str, Path]) -> PgnParseResult:
        """Read and parse a PGN file.

        Args:
            path: Path to the PGN file.

        Returns:
            PgnParseResult with parsed games or an error message.
        """
        path = Path(path)
        try:
            pgn_text = path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            return PgnParseResult(False, error_message=f"Cannot read {path}: {e}")
        return PgnService.parse_pgn_text(pgn_text)

    @staticmethod
    def game_title(game: chess.pgn.Game) -> str:
        """Build a one-line title from the game headers.

        Args:
            game: Parsed game.

        Returns:
            Title like "White - Black, Event Site Date, 1-0". Unknown values ("?") are skipped.
        """
        headers = game.headers

        def known(key: str) -> str:
            value = headers.get(key, "").strip()
            return "" if not value or set(value) <= set("?.") else value

        players = " - ".join(name for name in (known("White"), known("Black")) if name)
        details = " ".join(value for value in (known("Event"), known("Site"), known("Date")) if value)
        result = headers.get("Result", "*")

        parts = [part for part in (players, details) if part]
        if result and result != "*":
            parts.append(result)
        return ", ".join(parts) if parts else "Game"
