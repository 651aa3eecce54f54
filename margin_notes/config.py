"""Configuration for margin notes.

Settings can be customized via:
1. JSON config file: .margin_notes/config.json (project-level)
                     ~/.margin_notes/config.json (user-level fallback)
2. Environment variables: MARGIN_NOTES_<SETTING>=<value>

Environment variables override file settings. Example config file:

    {
        "truncate_width": 60,
        "command_categories": {"pick-theme": "face"},
        "prompt_categories": [["\\\\bsetting\\\\b", "variable"]]
    }
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from .display_width import DEFAULT_ELLIPSIS
from .formatter import AnnotationFormatter
from .registry import AnnotatorRegistry

logger = logging.getLogger(__name__)

ENV_PREFIX = "MARGIN_NOTES_"
INT_SETTINGS = ("truncate_width", "value_width", "right_margin")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class MarginConfig:
    """Settings for annotation layout and category inference.

    Attributes:
        truncate_width: Column budget for annotation text.
        value_width: Column budget for value fields.
        right_margin: Column annotations align against (None = terminal width).
        ellipsis: Marker used when text is cut.
        enabled: Whether annotation mode starts enabled.
        command_categories: Command name -> category overrides.
        prompt_categories: [pattern, category] pairs tried before the defaults.
    """
    truncate_width: int = 80
    value_width: int = 20
    right_margin: Optional[int] = None
    ellipsis: str = DEFAULT_ELLIPSIS
    enabled: bool = True
    command_categories: Dict[str, str] = field(default_factory=dict)
    prompt_categories: List[List[str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarginConfig":
        """Create config from a dictionary.

        Unknown keys and invalid values are logged and ignored.
        """
        config = cls()
        config.update(data)
        return config

    def update(self, data: Dict[str, Any]) -> None:
        """Apply settings from a dictionary onto this config."""
        valid_fields = {f.name for f in fields(self)}
        for key, value in data.items():
            if key not in valid_fields:
                logger.warning(f"Unknown margin notes setting '{key}' - ignoring")
                continue

            if key == "right_margin" and value is None:
                pass
            elif key in INT_SETTINGS:
                value = _parse_width(key, value)
                if value is None:
                    continue
            elif key == "ellipsis" and not isinstance(value, str):
                logger.warning(f"Setting 'ellipsis' must be a string, got {value!r} - ignoring")
                continue
            elif key == "enabled" and isinstance(value, str):
                value = value.strip().lower() not in FALSE_VALUES
            elif key == "command_categories" and not isinstance(value, dict):
                logger.warning("Setting 'command_categories' must be an object - ignoring")
                continue
            elif key == "prompt_categories" and not _valid_prompt_categories(value):
                logger.warning("Setting 'prompt_categories' must be a list of [pattern, category] - ignoring")
                continue

            setattr(self, key, value)

    @classmethod
    def from_env(cls) -> "MarginConfig":
        """Create config from environment variables.

        Examples:
            MARGIN_NOTES_TRUNCATE_WIDTH=60
            MARGIN_NOTES_ENABLED=0
        """
        config = cls()
        config.update(_env_settings())
        return config

    @classmethod
    def from_file(
        cls,
        project_path: str = ".margin_notes/config.json",
        user_path: Optional[str] = None,
    ) -> Optional["MarginConfig"]:
        """Load config from the first existing JSON file.

        Args:
            project_path: Project-level config path.
            user_path: User-level config path (default: ~/.margin_notes/config.json).

        Returns:
            MarginConfig if a config file was found and loaded, None otherwise.
        """
        if user_path is None:
            user_path = str(Path.home() / ".margin_notes" / "config.json")

        for path in [project_path, user_path]:
            config_path = Path(path)
            if not config_path.exists():
                continue
            try:
                with open(config_path, 'r') as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON in margin notes config {path}: {e}")
                continue
            except OSError as e:
                logger.warning(f"Error reading margin notes config {path}: {e}")
                continue

            if not isinstance(data, dict):
                logger.warning(f"Margin notes config {path} must contain an object - ignoring")
                continue

            logger.info(f"Loaded margin notes config from {path}")
            return cls.from_dict(data)

        return None

    def make_formatter(self) -> AnnotationFormatter:
        """Build a formatter using these widths."""
        return AnnotationFormatter(
            truncate_width=self.truncate_width,
            value_width=self.value_width,
            ellipsis=self.ellipsis,
        )

    def apply_to(self, registry: AnnotatorRegistry) -> None:
        """Install command overrides and prompt patterns into a registry.

        Configured prompt patterns are tried before the built-in ones, in
        the order given.
        """
        for command, category in self.command_categories.items():
            registry.set_command_category(command, category)
        for pattern, category in reversed(self.prompt_categories):
            try:
                registry.add_prompt_category(pattern, category, first=True)
            except re.error as e:
                logger.warning(f"Invalid prompt pattern {pattern!r}: {e} - ignoring")


def load_config(
    project_path: str = ".margin_notes/config.json",
    user_path: Optional[str] = None,
) -> MarginConfig:
    """Load config from file (if any), then apply environment overrides."""
    config = MarginConfig.from_file(project_path, user_path) or MarginConfig()
    config.update(_env_settings())
    return config


def _env_settings() -> Dict[str, str]:
    settings = {}
    for name in ("truncate_width", "value_width", "right_margin", "ellipsis", "enabled"):
        value = os.environ.get(ENV_PREFIX + name.upper())
        if value is not None:
            settings[name] = value
    return settings


def _parse_width(key: str, value: Any) -> Optional[int]:
    try:
        width = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Setting '{key}' must be an integer, got {value!r} - ignoring")
        return None
    if width <= 0:
        logger.warning(f"Setting '{key}' must be positive, got {width} - ignoring")
        return None
    return width


def _valid_prompt_categories(value: Any) -> bool:
    if not isinstance(value, list):
        return False
    return all(
        isinstance(entry, (list, tuple)) and len(entry) == 2
        and all(isinstance(part, str) for part in entry)
        for entry in value
    )
