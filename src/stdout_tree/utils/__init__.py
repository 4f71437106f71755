"""Utility functions."""

from stdout_tree.utils.logging import setup_logging

__all__ = ["setup_logging"]
