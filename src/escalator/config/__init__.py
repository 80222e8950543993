"""Configuration for escalator."""

from .settings import Settings

__all__ = ["Settings"]
