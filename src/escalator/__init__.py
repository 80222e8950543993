"""Escalator: tiered incident-response controller."""

__version__ = "0.1.0"
