"""Pallanguzhi: rules engine, CPU opponents and terminal front end."""

__version__ = "0.1.0"
