"""Alpha-beta Battlesnake for 1v1 games."""

__version__ = "1.0.0"
