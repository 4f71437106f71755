"""Unified configuration management."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, ClassVar, Optional

import yaml
from dotenv import load_dotenv
from rich.console import Console

from stdout_tree.render.printer import RenderConfig

COLOR_MODES = ("auto", "always", "never")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class Settings:
    """Exporter and CLI configuration.

    ``width`` of None means the console width is probed at render time.
    """

    width: int | None = None
    color: str = "auto"
    show_attributes: bool = False
    hold_incomplete_traces: bool = False
    log_level: str = "INFO"

    _instance: ClassVar[Optional["Settings"]] = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Settings":
        """Load configuration.

        Priority: environment variables > config file > defaults
        """
        # Load .env
        load_dotenv()

        settings = cls()

        if config_path:
            settings._load_from_file(Path(config_path))
        else:
            default_config = Path("configs") / "stdout_tree.yaml"
            if default_config.exists():
                settings._load_from_file(default_config)

        settings._load_from_env()

        cls._instance = settings
        return settings

    @classmethod
    def get_instance(cls) -> "Settings":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    def _load_from_file(self, path: Path):
        """Load from configuration file."""
        if not path.exists():
            return

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        self._apply_config(data.get("stdout_tree", data))

    def _load_from_env(self):
        """Load from environment variables."""
        width = os.getenv("STDOUT_TREE_WIDTH")
        if width and width.strip().isdigit():
            self.width = int(width)

        color = os.getenv("STDOUT_TREE_COLOR")
        if color:
            self.color = color.strip().lower()

        show_attributes = os.getenv("STDOUT_TREE_SHOW_ATTRIBUTES")
        if show_attributes:
            self.show_attributes = _parse_bool(show_attributes)

        hold = os.getenv("STDOUT_TREE_HOLD_TRACES")
        if hold:
            self.hold_incomplete_traces = _parse_bool(hold)

        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

    def _apply_config(self, data: dict):
        """Apply configuration data."""
        if "width" in data:
            self.width = int(data["width"]) if data["width"] is not None else None
        if "color" in data:
            self.color = str(data["color"]).lower()
        if "show_attributes" in data:
            self.show_attributes = bool(data["show_attributes"])
        if "hold_incomplete_traces" in data:
            self.hold_incomplete_traces = bool(data["hold_incomplete_traces"])
        if "log_level" in data:
            self.log_level = str(data["log_level"])

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.width is not None and self.width < 1:
            errors.append(f"width must be positive, got {self.width}")
        if self.color not in COLOR_MODES:
            errors.append(
                f"color must be one of {', '.join(COLOR_MODES)}, got {self.color!r}"
            )
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors

    def make_console(self, file: IO[str] | None = None) -> Console:
        """Create the console trees are written to."""
        if self.color == "always":
            return Console(file=file, force_terminal=True, highlight=False)
        if self.color == "never":
            return Console(file=file, color_system=None, highlight=False)
        return Console(file=file, highlight=False)

    def render_config(self, console_width: int) -> RenderConfig:
        return RenderConfig(
            width=self.width or console_width,
            show_attributes=self.show_attributes,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "width": self.width,
            "color": self.color,
            "show_attributes": self.show_attributes,
            "hold_incomplete_traces": self.hold_incomplete_traces,
            "log_level": self.log_level,
        }
