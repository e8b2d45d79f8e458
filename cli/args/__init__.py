"""CLI argument registration."""

from .base import add_scan_args

__all__ = ["add_scan_args"]
