"""Bundled data files for boxy."""
