"""Configuration loader with strict validation."""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union

from pgnbrowser.utils.path_resolver import get_app_resource_path


DEFAULT_CONFIG_PATH = "pgnbrowser/config/config.json"

# Number of distinct stone values (black king .. empty .. white king)
STONE_IMAGE_COUNT = 13


class ConfigLoader:
    """Loads config.json and validates the sections the browser depends on.

    Validation is strict: a missing section or key raises ValueError instead of
    silently falling back to defaults, so a broken configuration is reported
    at startup rather than producing a half-rendered page.
    """

    REQUIRED_SECTIONS = ('logging', 'browser')
    REQUIRED_BROWSER_KEYS = (
        'image_prefix',
        'style_filename',
        'white_square_images',
        'black_square_images',
    )

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """Initialize the loader.

        Args:
            config_path: Path to a JSON configuration file. Defaults to the bundled config.json.
        """
        if config_path is None:
            self.config_path = get_app_resource_path(DEFAULT_CONFIG_PATH)
        else:
            self.config_path = Path(config_path)

    def load(self) -> Dict[str, Any]:
        """Load and validate the configuration.

        Returns:
            Configuration dictionary.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ValueError: If the file is not valid JSON or fails validation.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.config_path}: {e}") from e

        self.validate(config)
        return config

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """Validate a configuration dictionary.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If a required section or key is missing or malformed.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration root must be a JSON object")

        for section in cls.REQUIRED_SECTIONS:
            if section not in config:
                raise ValueError(f"Missing required configuration section: {section}")

        browser_config = config['browser']
        for key in cls.REQUIRED_BROWSER_KEYS:
            if key not in browser_config:
                raise ValueError(f"Missing required configuration key: browser.{key}")

        for key in ('white_square_images', 'black_square_images'):
            images = browser_config[key]
            if not isinstance(images, list) or len(images) != STONE_IMAGE_COUNT:
                raise ValueError(
                    f"browser.{key} must list exactly {STONE_IMAGE_COUNT} image names"
                )

        style_filename = browser_config['style_filename']
        if style_filename is not None and not isinstance(style_filename, str):
            raise ValueError("browser.style_filename must be a string or null")
