# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating sixel-inline configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/sixel-inline/  (default: ~/.config/sixel-inline/)
#
# Files:
#   - config.toml: User preferences for inline image rendering
#
# Example config.toml:
#
#   [rendering]
#   show_images = true
#   image_width = 200
#   thumbnail_width = 100
#   max_colors = 256
#   highlight_style = "cyan"
#   prefetch_workers = 4
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "sixel-inline"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for sixel-inline.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/sixel-inline/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class RenderingConfig:
    """
    Configuration for inline image rendering.

    Attributes:
        show_images: Render referenced images (when the terminal can).
                     Off by default; text and highlighted references are
                     always shown.
        image_width: Maximum pixel width for {{image()}} and Markdown images.
        thumbnail_width: Maximum pixel width for {{thumbnail()}} images.
        max_colors: Palette size used when quantizing (1-256).
        highlight_style: Rich style applied to image reference markup.
        prefetch_workers: Images fetched and encoded concurrently before
                          output starts. 1 = strictly one at a time.
    """
    show_images: bool = False
    image_width: int = 200              # Pixels
    thumbnail_width: int = 100          # Pixels
    max_colors: int = 256
    highlight_style: str = "cyan"
    prefetch_workers: int = 1

    def __post_init__(self) -> None:
        if self.image_width < 1 or self.thumbnail_width < 1:
            raise ConfigError("Image widths must be positive")
        if not 1 <= self.max_colors <= 256:
            raise ConfigError(f"max_colors must be between 1 and 256, got {self.max_colors}")
        if self.prefetch_workers < 1:
            raise ConfigError("prefetch_workers must be at least 1")


@dataclass
class Config:
    """
    Main configuration container for sixel-inline.

    Attributes:
        rendering: Inline image rendering configuration.

    Usage:
        >>> config = Config.load()
        >>> config.rendering.image_width
        200
    """
    rendering: RenderingConfig = field(default_factory=RenderingConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from a config file.

        If the file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        """
        Save configuration to a config file.

        Creates the parent directory if it doesn't exist.

        Returns:
            The path written.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

        return config_path

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).
        """
        rendering = data.get("rendering", {})
        if not isinstance(rendering, dict):
            raise ConfigError("[rendering] must be a table")

        try:
            return cls(rendering=RenderingConfig(
                show_images=bool(rendering.get("show_images", False)),
                image_width=int(rendering.get("image_width", 200)),
                thumbnail_width=int(rendering.get("thumbnail_width", 100)),
                max_colors=int(rendering.get("max_colors", 256)),
                highlight_style=str(rendering.get("highlight_style", "cyan")),
                prefetch_workers=int(rendering.get("prefetch_workers", 1)),
            ))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid rendering setting: {e}") from e

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        return {
            "rendering": {
                "show_images": self.rendering.show_images,
                "image_width": self.rendering.image_width,
                "thumbnail_width": self.rendering.thumbnail_width,
                "max_colors": self.rendering.max_colors,
                "highlight_style": self.rendering.highlight_style,
                "prefetch_workers": self.rendering.prefetch_workers,
            },
        }


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print the XDG paths for debugging.
    Useful for users wondering where their config is stored.
    """
    print(f"Config:       {get_xdg_config_home()}")
    print(f"Config file:  {Config.config_file_path()}")
