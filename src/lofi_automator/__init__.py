"""Lofi Automator - render ambient videos and publish them to YouTube."""

__version__ = "0.1.0"
