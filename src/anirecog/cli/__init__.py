"""Command-line interface for anirecog."""
