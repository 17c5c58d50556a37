"""Precious-metal spot price monitor: polling, chart history and live ticker."""

__version__ = "0.1.0"
