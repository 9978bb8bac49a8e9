"""Path resolution utility for determining where to store user data files.

This module handles smart path resolution that:
1. Checks if the tool has write access to its root directory
2. If yes, uses the root directory (portable mode)
3. If no, uses platform-specific user data directories
"""

import os
import sys
from pathlib import Path
from typing import Tuple


APP_NAME = "PgnBrowser"


def get_app_root() -> Path:
    """Get the application root directory.

    Returns:
        Path to the directory containing the pgnbrowser package.
    """
    # pgnbrowser/utils/path_resolver.py -> project root
    return Path(__file__).parent.parent.parent


def has_write_access(directory: Path) -> bool:
    """Check if the application has write access to a directory.

    Args:
        directory: Directory path to check.

    Returns:
        True if write access is available, False otherwise.
    """
    if not directory.exists():
        return False

    test_file = directory / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
        return True
    except (OSError, PermissionError):
        return False


def get_user_data_directory() -> Path:
    """Get the platform-specific user data directory.

    Returns:
        Path to the user data directory for the browser tool.
    """
    if sys.platform == "win32":
        # Windows: %APPDATA%\PgnBrowser
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    elif sys.platform == "darwin":
        # macOS: ~/Library/Application Support/PgnBrowser
        return Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        # Linux and other Unix-like: $XDG_DATA_HOME/PgnBrowser or ~/.local/share/PgnBrowser
        xdg_data_home = os.getenv("XDG_DATA_HOME")
        if xdg_data_home:
            return Path(xdg_data_home) / APP_NAME
        return Path.home() / ".local" / "share" / APP_NAME


def resolve_data_file_path(filename: str) -> Tuple[Path, bool]:
    """Resolve the path for a user data file (log files).

    Args:
        filename: Name of the data file (e.g., "pgnbrowser.log").

    Returns:
        Tuple of (resolved_path, is_portable_mode).
        - resolved_path: The path where the file should be written
        - is_portable_mode: True if using app root, False if using user data directory
    """
    app_root = get_app_root()

    if has_write_access(app_root):
        return app_root / filename, True

    user_data_dir = get_user_data_directory()
    user_data_dir.mkdir(parents=True, exist_ok=True)
    return user_data_dir / filename, False


def get_app_resource_path(relative_path: str) -> Path:
    """Get the path to an application resource file.

    Resources are always read from the package tree, never from user data.

    Args:
        relative_path: Relative path from app root (e.g., "pgnbrowser/config/config.json").

    Returns:
        Path to the resource file.
    """
    return get_app_root() / relative_path
