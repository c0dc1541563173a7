"""Shared utilities: placeholder resolution and logging setup."""
