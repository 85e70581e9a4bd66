"""Build and play typed-out replays of commit changes in an editor and terminal."""

__version__ = "0.8.0"