"""gitwalk - Interactive stage, commit and sync assistant for git."""

__version__ = "0.1.0"
