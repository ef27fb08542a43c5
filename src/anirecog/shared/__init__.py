"""anirecog Shared Module.

This package contains constants, error types, logging helpers and
synchronization utilities used across anirecog.
"""

__all__ = ["constants", "errors", "logging", "utils"]
