"""Classify Telegram bot updates and route them to registered handlers."""

__version__ = "0.1.0"
