"""Gemini-grounded image search bot for Telegram."""

__version__ = "0.1.0"
