"""boxy - interactive terminal front-end for system package managers."""

__version__ = "0.1.0"
