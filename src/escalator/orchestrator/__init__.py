"""Watchdog orchestrator for escalator."""

from .watchdog import WatchdogService

__all__ = ["WatchdogService"]
