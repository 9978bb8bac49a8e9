"""Controller orchestrating PGN loading, game flattening and HTML export."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import chess.pgn

from pgnbrowser.models.navigation_index import NavigationIndex
from pgnbrowser.services.game_traversal_service import GameTraversalService
from pgnbrowser.services.html_game_browser_service import HtmlGameBrowserService
from pgnbrowser.services.logging_service import LoggingService
from pgnbrowser.services.pgn_service import PgnService


class GameBrowserController:
    """Controller for turning PGN games into browsable HTML pages.

    This controller ties the PGN service, the traversal driver and the HTML
    renderer together. Errors that make an export impossible are raised as
    ValueError so that the caller decides how to report them.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the controller.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.browser_service = HtmlGameBrowserService(config)
        self._logger = LoggingService.get_instance()

    def load_games(self, pgn_path: Union[str, Path]) -> List[chess.pgn.Game]:
        """Load all games from a PGN file.

        Args:
            pgn_path: Path to the PGN file.

        Returns:
            List of parsed games.

        Raises:
            ValueError: If the file cannot be read or contains no games.
        """
        result = PgnService.read_pgn_file(pgn_path)
        if not result.success:
            raise ValueError(result.error_message)
        self._logger.info(f"Loaded {len(result.games)} game(s) from {pgn_path}")
        return result.games

    def build_index(self, game: chess.pgn.Game) -> NavigationIndex:
        """Flatten a game into a sealed navigation index."""
        with_lines = self.config.get('browser', {}).get('with_lines', True)
        return GameTraversalService.build_index(game, with_lines=with_lines)

    def render_game(self, game: chess.pgn.Game, content_only: bool = False) -> str:
        """Render one game to HTML."""
        return self.browser_service.produce_html(game, content_only=content_only)

    def export_game(
        self,
        pgn_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        game_number: int = 1,
        content_only: bool = False,
    ) -> str:
        """Render one game of a PGN file and optionally write it to disk.

        Args:
            pgn_path: Path to the PGN file.
            output_path: File to write. If None, nothing is written.
            game_number: 1-based number of the game in the file.
            content_only: If True skip the document head and body wrapper.

        Returns:
            The HTML text.

        Raises:
            ValueError: If the file has no such game.
        """
        games = self.load_games(pgn_path)
        if not 1 <= game_number <= len(games):
            raise ValueError(f"Game {game_number} not found, {pgn_path} holds {len(games)} game(s)")

        game = games[game_number - 1]
        html_text = self.render_game(game, content_only=content_only)

        if output_path is not None:
            output_path = Path(output_path)
            output_path.write_text(html_text, encoding='utf-8')
            self._logger.info(f"Game {game_number} exported to {output_path}")

        return html_text
