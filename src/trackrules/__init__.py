"""Track Rules - per-user audio and subtitle track selection."""

__version__ = "0.1.0"
