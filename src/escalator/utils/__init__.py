"""Utility modules for escalator."""

from .scheduler import Scheduler

__all__ = ["Scheduler"]
