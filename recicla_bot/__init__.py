"""Telegram webhook that classifies photographed waste and replies in Spanish."""

__version__ = "0.1.0"
