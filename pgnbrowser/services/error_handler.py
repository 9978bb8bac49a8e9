"""Error reporting for the command line entry point."""

import sys
import traceback
from typing import Optional


# Problems with the user's input (bad PGN path, missing game, invalid config).
# These are reported in one line; anything else is a bug and gets the full report.
INPUT_ERRORS = (ValueError, FileNotFoundError)


class ErrorHandler:
    """Reports errors that end a browse_game run and sets the exit status."""

    @staticmethod
    def is_input_error(error: BaseException) -> bool:
        """True if the error stems from user input rather than from PgnBrowser itself."""
        return isinstance(error, INPUT_ERRORS)

    @staticmethod
    def handle_fatal_error(error: BaseException, context: Optional[str] = None) -> None:
        """Report an error to stderr and exit with status 1.

        Input errors get a single line. Unexpected errors, broken traversals
        included, get a report with the traceback.

        Args:
            error: The exception that occurred.
            context: Optional description of what was being done.
        """
        if ErrorHandler.is_input_error(error):
            prefix = f"{context}: " if context else ""
            print(f"browse_game: error: {prefix}{error}", file=sys.stderr)
            sys.exit(1)

        print("=" * 80, file=sys.stderr)
        print("FATAL ERROR", file=sys.stderr)
        print("=" * 80, file=sys.stderr)

        if context:
            print(f"Context: {context}", file=sys.stderr)
        print(f"Error Type: {type(error).__name__}", file=sys.stderr)
        print(f"Error Message: {error}", file=sys.stderr)
        print("", file=sys.stderr)

        traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)
        print("=" * 80, file=sys.stderr)

        sys.exit(1)

    @staticmethod
    def setup_exception_handler() -> None:
        """Route uncaught exceptions through handle_fatal_error; Ctrl+C exits quietly."""
        def exception_handler(exc_type, exc_value, exc_traceback):
            if issubclass(exc_type, KeyboardInterrupt):
                print("\nInterrupted.", file=sys.stderr)
                sys.exit(130)

            error = exc_value if exc_value else exc_type()
            ErrorHandler.handle_fatal_error(error, "Uncaught exception")

        sys.excepthook = exception_handler
