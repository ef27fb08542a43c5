"""Core recognition modules of anirecog."""
