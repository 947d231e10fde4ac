"""Shared utilities: caching, cancellation and logging setup."""
