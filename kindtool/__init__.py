"""Helpers for cluster tooling: errors, concurrency, command running, filesystem, version and image utilities."""

__version__ = "0.29.0"

__all__ = ["concurrent", "errors", "fs", "images", "iostreams", "runner", "version"]