"""Shared utilities for anirecog."""

from .locks import ReadWriteLock

__all__ = ["ReadWriteLock"]
