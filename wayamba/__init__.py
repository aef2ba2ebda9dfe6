"""Wayamba tourism feedback and asset service."""

__version__ = "0.1.0"
