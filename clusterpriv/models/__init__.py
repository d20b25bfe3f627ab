"""Data models package."""

from .privilege import NONE, Privilege

__all__ = ["NONE", "Privilege"]
