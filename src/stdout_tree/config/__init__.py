"""Configuration module."""

from stdout_tree.config.settings import Settings

__all__ = ["Settings"]
