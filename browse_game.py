"""Entry point for PgnBrowser: render a PGN game as a browsable HTML page."""

import argparse
import sys
from typing import List, Optional

from pgnbrowser.config.config_loader import ConfigLoader
from pgnbrowser.controllers.game_browser_controller import GameBrowserController
from pgnbrowser.services.error_handler import ErrorHandler
from pgnbrowser.services.logging_service import LoggingService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="browse_game",
        description="Render a chess game from a PGN file as an HTML page with move navigation.",
    )
    parser.add_argument("pgn_file", help="PGN file to read")
    parser.add_argument("-o", "--output", help="HTML file to write (default: stdout)")
    parser.add_argument("-g", "--game", type=int, default=1, help="1-based number of the game in the file")
    parser.add_argument("--content-only", action="store_true", help="omit the document head and body wrapper")
    parser.add_argument("--config", help="configuration file (default: bundled config.json)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Run PgnBrowser."""
    ErrorHandler.setup_exception_handler()
    args = parse_args(argv)

    try:
        config = ConfigLoader(args.config).load()
        LoggingService.get_instance(config).initialize()

        controller = GameBrowserController(config)
        html_text = controller.export_game(
            args.pgn_file,
            output_path=args.output,
            game_number=args.game,
            content_only=args.content_only,
        )
        if args.output is None:
            sys.stdout.write(html_text)
    except Exception as e:
        ErrorHandler.handle_fatal_error(e, "Rendering game")
    finally:
        LoggingService.reset_instance()


if __name__ == "__main__":
    main()
