"""Packaged data files (default structure registry)."""
