"""Client for a flight simulator's binary state protocol."""

__version__ = "0.1.0"
