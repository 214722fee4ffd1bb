"""Periodic runner for the yield strategy-selection agent."""

__version__ = "0.1.0"
