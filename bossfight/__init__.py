"""Boss-fight combat engine for the cozy-fantasy RPG."""

__version__ = "0.3.0"
